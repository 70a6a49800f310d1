# statusbar

`statusbar` builds one status line out of small pieces of system
information and refreshes it at a fixed interval. By default the line
becomes the name (`WM_NAME`) of the X root window, where window manager
bars pick it up; with `-s` it is written to standard output instead.

## Installation

```sh
pip install .
```

For the tests:

```sh
pip install .[test]
pytest
```

## The command

```sh
statusbar -s
```

The command shows CPU usage, used and total memory, and the date and time,
refreshed every second (1000 ms). Without `-s` it connects to the X server
named by `DISPLAY` (reading credentials from `XAUTHORITY` or
`~/.Xauthority`) and sets the root window name; on exit it clears it.

Options, which may be combined (`-s1`); `--` ends them:

- `-s` writes the status line to standard output on every update.
- `-1` writes the status line once and exits (implies `-s`).
- `-v` prints the version to standard error and exits with status 1.

Any other option, or any argument, prints a usage message and exits with
status 1. If the display cannot be opened the command exits with status 1.
`SIGINT` and `SIGTERM` end the loop after the current line; `SIGUSR1`
wakes the loop early so the line is refreshed straight away.

## Components

Every component is a function that takes one argument and returns a string,
or `None` when the value cannot be read. The file-based components read the
Linux `/proc` and `/sys` interfaces.

| Module | Functions | Argument |
| --- | --- | --- |
| `statusbar.battery` | `battery_perc`, `battery_state` (`+`, `-`, `o` or `?`), `battery_remaining` (`"3h 12m"`, or `""` when not discharging) | battery name, e.g. `BAT0`; optional `sysfs` root |
| `statusbar.cpu` | `cpu_freq`, `cpu_perc` (usage since the previous call; `None` on the first) | unused |
| `statusbar.files` | `cat` (first line of a file), `num_files` (entries in a directory), `run_command` (first line of a shell command's output) | path or command |
| `statusbar.memory` | `ram_free`, `ram_perc`, `ram_total`, `ram_used`, `swap_free`, `swap_perc`, `swap_total`, `swap_used`, `parse_meminfo` | unused; optional `path` to a meminfo file |
| `statusbar.network` | `ipv4`, `ipv6`, `netspeed_rx`, `netspeed_tx`, `wifi_perc`, `wifi_essid`, `rssi_to_perc` | interface name |
| `statusbar.keyboard` | `keyboard_indicators` (format such as `c?n?`), `keymap`, `format_indicators`, `get_layout` | format or unused |
| `statusbar.system` | `datetime` (`strftime` format), `hostname`, `kernel_release`, `load_avg`, `uptime`, `gid`, `uid`, `username`, `entropy`, `disk_free`, `disk_perc`, `disk_total`, `disk_used`, `temp` (millidegree sensor file) | as noted, mount point for disks |
| `statusbar.volume` | `vol_perc` (OSS mixer volume) | mixer device, e.g. `/dev/mixer` |

`ram_total` and `ram_used` give whole GiB (`"15G"`); the other size
components use `fmt_human`. `statusbar.cpu.CpuUsage` and
`statusbar.network.NetSpeed` are the stateful objects behind `cpu_perc`
and the net speed functions; create your own to track another file,
interface or interval:

```python
from statusbar.network import NetSpeed

rx = NetSpeed("rx", interval=2000)
rx("wlan0")   # None on the first call, then e.g. "12.3 Ki"
```

`keyboard_indicators` and `keymap` talk to the X server directly. In
`format_indicators`, `c` stands for caps lock and `n` for num lock; a letter
followed by `?` appears only while its lock is on, otherwise it always
appears, upper case when on:

```python
from statusbar.keyboard import format_indicators

format_indicators("cn", 0b01)    # "Cn"
format_indicators("c?n?", 0b10)  # "n"
```

## Using it from Python

```python
import sys

from statusbar.status import Component, Options, render_status, run
from statusbar.cpu import cpu_perc
from statusbar.system import datetime

components = [
    Component(cpu_perc, " cpu %s%%"),
    Component(datetime, " %s", "%F %T"),
]
print(render_status(components, "n/a", 2048))
run(Options(stdout=True, once=True), components, 1000, sys.stdout)
```

A format may hold `%s` for the value and `%%` for a percent sign. A
component without a value shows the `unknown` text. The line is cut to
`maxlen - 1` bytes, with a warning on standard error when it is cut.
`parse_args` turns command-line flags into `Options` and raises
`UsageError` for anything it does not accept.

`statusbar.util.fmt_human` scales a number with a base of 1000 or 1024:

```python
from statusbar.util import fmt_human

fmt_human(1536, 1024)   # "1.5 Ki"
```

## What it does not do

- There is no configuration file: the command always shows the four
  components above. Other combinations are built from Python with
  `Component` and `run`.
- Components read Linux interfaces only; there is no support for BSD
  systems or for sndio audio.