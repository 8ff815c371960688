# composekit

Building blocks for command-line tools that drive containers: live progress
reporting, interactive prompts, a line-splitting sink, a couple of string
helpers and the logic that decides whether to suggest an image scan after a
build. It has no dependencies outside the standard library.

## Modules

### Progress reporting — `composekit.writers`

All writers implement the abstract `Writer` interface: `start()`, `stop()`,
`event(event)`, `events(events)` and `tail_msgf(msg, *args)`.

- `TTYWriter(out)` redraws a block of lines on a terminal every 100 ms while
  `start()` runs: a `[+] Running done/total` header, then one line per event
  with a spinner, the id, the text, the status text and the elapsed time.
  Child events (those with a `parent_id`) are indented under their parent.
  Lines are coloured white (working), blue (done) or red (error) except on
  Windows. Long status texts are cut to fit the terminal width. Messages
  given to `tail_msgf` are `%`-formatted and printed once `start()` ends.
- `PlainWriter(out)` prints one line per event: id, text and status text.
  `tail_msgf` prints the message and its arguments separated by spaces.
- `NoopWriter()` discards everything.

`new_writer(out, mode=None)` chooses a writer. Modes are `MODE_AUTO`
(`"auto"`: a TTY writer when `out` is a terminal, otherwise plain),
`MODE_TTY` (`"tty"`: raises `ValueError` when `out` is not a terminal) and
`MODE_PLAIN` (`"plain"`). When `mode` is omitted, the module-level
`default_mode` is used.

`run(func)` and `run_with_status(func)` call `func` while a writer chosen
for standard error renders in a background thread; `run_with_status`
returns the string `func` returns. Inside `func`, `context_writer()` returns
that writer. Outside such a block it returns a `NoopWriter`.
`with_context_writer(writer)` is a context manager that makes any writer the
current one.

The rendering helpers are public too: `line_text(event, pad,
terminal_width, status_padding, color)`, `num_done(events)` and
`align(left, right, width)`.

### Events — `composekit.events`

An `Event` has an `id`, an optional `parent_id`, a `text`, a `status`
(`EventStatus.WORKING`, `DONE` or `ERROR`) and a `status_text`. The TTY
writer fills in its start and end times and a spinner. `new_event(event_id,
status, status_text)` builds one. Helpers build the common ones:
`creating_event`, `created_event`, `starting_event`, `started_event`,
`waiting`, `healthy`, `exited`, `restarting_event`, `restarted_event`,
`running_event`, `stopping_event`, `stopped_event`, `killing_event`,
`killed_event`, `removing_event`, `removed_event`, `error_event` and
`error_message_event(event_id, msg)`.

### Spinner — `composekit.spinner`

`Spinner` moves to its next frame each time it is rendered with `str()`
once it is more than 100 ms old. After `stop()` it shows its final frame.

### Line splitting — `composekit.linewriter`

`get_writer(consumer)` returns a `SplitWriter`. It takes bytes or text in
`write()`, and hands each complete line to `consumer` without the newline.
`close()`, or leaving a `with` block, passes on any unterminated remainder.

### String helpers — `composekit.stringutils`

`string_contains(array, needle)` tests membership. `string_to_bool(s)`
returns `True` for `1`, `t` or `true` in any case, with surrounding
whitespace ignored. It returns `False` for anything else.

### Prompts — `composekit.prompt`

`UI` is a protocol with `select`, `input`, `confirm` and `password`.
`User` implements it on the terminal:

- `select(message, options)` returns the index of the chosen option, by
  number or by name. An empty answer gives the first option, and empty
  `options` raises `ValueError`.
- `input(message, default_value)` returns the answer, or `default_value`
  when the answer is empty.
- `confirm(message, default_value)` accepts `y`/`yes`/`n`/`no` and asks
  again after any other answer.
- `password(message)` reads without echo.

You can pass your own `reader`, `password_reader` and `stream` to
`User(...)`, for example to script it in tests.

### Scan suggestion — `composekit.scan_suggest`

`display_scan_suggest_msg(available, config_dir=None, stream=None)` writes
`SCAN_SUGGEST_MSG` to `stream` (standard error by default) and returns
`True` only when all of these hold:

- `DOCKER_SCAN_SUGGEST` is not `false`.
- `available` is true.
- `scan_already_invoked(config_dir)` is false.

`scan_already_invoked` reads `scan/config.json` under the configuration
directory and returns its `optin` flag. When the file is missing it returns
`False`. When the file is unreadable or malformed it returns `True`.
`docker_config_dir()` gives `$DOCKER_CONFIG`, or `~/.docker` when that is
unset.

## Examples

Splitting a byte stream into lines:

```python
from composekit.linewriter import get_writer

lines = []
writer = get_writer(lines.append)
writer.write(b"hel")
writer.write(b"lo\nworld!\n")
writer.close()
assert lines == ["hello", "world!"]
```

Reporting progress while doing work:

```python
from composekit.events import creating_event, created_event
from composekit.writers import context_writer, run


def deploy():
    writer = context_writer()
    writer.event(creating_event("Container web-1"))
    ...  # do the work
    writer.event(created_event("Container web-1"))


run(deploy)
```

Checking a flag from the environment:

```python
from composekit.stringutils import string_to_bool

string_to_bool(" True ")   # True
string_to_bool("nope")     # False
```

## What it does not do

This is a library. It installs no command and does not talk to a container
engine itself:

- It has no harness for running the container CLI in tests.
- `display_scan_suggest_msg` does not look for the scan plugin. The caller
  says whether it is available.

## Tests

The test suite uses pytest. Install it with the `test` extra and run
`pytest`.