# dirgrep

`dirgrep` looks through the files under a directory for lines that match a
regular expression. Files are read in parallel on a pool of up to 100 threads.
A single output thread prints each hit, so results from different files never
get mixed together.

## Installation

```
pip install .
```

To include the test dependencies:

```
pip install .[test]
```

## Usage

```
dirgrep [-v] <path_pattern> <regex_pattern>
```

`path_pattern` tells dirgrep where to look and which files to read:

- When it ends in a slash, dirgrep reads every file under that directory:
  `dirgrep ~/Projects/ "error"`
- Otherwise its last part is a glob, matched case-sensitively against each
  file name: `dirgrep ~/Projects/"*.py" "def "`

If the path begins with `~` or `~/`, that part becomes your home directory.
Forms such as `~user` are left as they are.

`regex_pattern` is a Python regular expression. A line counts as a match when
the expression matches anywhere in it.

`-v` can go anywhere on the command line. It adds `[TRACE] ...` lines to
standard output that report each step of the search.

### What gets searched

- Subdirectories are searched recursively, except those named `.idea` or
  `.vscode`. Symbolic links to directories are not followed.
- Files larger than 50 MiB are skipped.
- A file is treated as binary, and skipped, when 1% or more of its first 512
  bytes are NUL bytes. Empty files are skipped as well.
- Directories and files that cannot be read are skipped. Only the `-v` trace
  output mentions them.
- Lines are decoded as UTF-8. Bytes that do not decode are replaced.
- A line of 1 MiB or more stops the search with an error.

### Output

Each match starts with a blank line and then the file path. If the line before
the match is not empty, it is printed next with an `N-` marker. The matching
line follows with an `N:` marker, coloured red with ANSI escape codes.

```
src/app.py:
11-  # handle the request
12:  def handle():
```

The search does not fill in the line that comes after a match, so the command
never prints an `N+` line. `format_match` does print one when a `Match` you
build yourself has an `after` value.

### Stopping and errors

Ctrl-C or SIGTERM prints `Signal received, cancelling...` and stops the search.
The command then writes `Error: context canceled` to standard error and exits
with status 1. When there are too few arguments, the regular expression does
not compile, or a worker fails, the message goes to standard error as
`Error: ...` and the exit status is also 1. A search that finishes exits with
status 0.

## Library use

```python
import re
import sys
from dirgrep.search import DirSearch

search = DirSearch("src", "*.py", re.compile(r"TODO"), max_workers=8, out=sys.stdout)
search.run()
```

- `DirSearch(search_dir, glob, pattern, max_workers=100, verbose=False, out=None)`
  accepts a compiled pattern or a pattern string. Output goes to `out`, or to
  standard output when `out` is not given. `max_workers` must be at least 1.
- `DirSearch.run(cancel=None)` returns once the search is done. If you pass a
  `threading.Event` and set it, the search stops and `run` raises
  `concurrent.futures.CancelledError`. Otherwise `run` raises the first error
  that any worker hit.
- `dirgrep.output` has the `Match` dataclass (`file_path`, `line_number`,
  `line`, `before`, `after`, `is_match`), `highlight_match`, `format_match`
  and `print_match(match, out=None)`.
- `dirgrep.util` has `should_skip_directory`, `expand_tilde` and
  `is_likely_text_file`. `is_likely_text_file` takes a binary file object and
  raises `EOFError` if there is nothing to read.
- `dirgrep.cli` has `parse_args(argv=None)`, which returns a `SearchArgs`
  (`search_dir`, `glob`, `pattern`, `verbose`) and raises `ValueError` on a
  usage error. It also has `main(argv=None)`, which returns the exit status.