# tera

tera is a small text editor that runs in the terminal. It shows line numbers, highlights
syntax for a number of common languages and has incremental search. It needs a POSIX
terminal, because it uses `termios` to switch the terminal into raw mode.

## Installing

```
pip install .
```

## Running

```
tera [FILE]
```

If you give a file name, tera opens that file. If you do not, it starts with an empty
buffer and asks for a file name the first time you save. Files are read and written as
Latin-1 text, one row per line, and every saved line ends with a newline.

If the terminal cannot be set up or the file cannot be opened, tera clears the screen,
prints the error to standard error and exits with status 1.

## Keys

| Key                  | Action                                        |
|----------------------|-----------------------------------------------|
| Arrow keys           | Move the cursor                               |
| Home / End           | Go to the start or end of the line            |
| Page Up / Page Down  | Move one screen up or down                    |
| Backspace / Delete   | Delete the character before / under the cursor |
| Enter                | Split the line at the cursor                  |
| Ctrl-F               | Search. Arrows go to the next or previous match, Enter keeps the position, Esc goes back |
| Ctrl-S               | Save                                          |
| Ctrl-Q               | Quit. If there are unsaved changes, press it a second time to confirm |

Messages in the bottom line disappear after five seconds.

## Syntax highlighting

The language is chosen from the file name. Supported extensions are
`.c`, `.h`, `.cpp`, `.cs`, `.css`, `.go`, `.html`, `.java`, `.js`, `.lua` and `.py`.
Comments, strings, numbers and two groups of keywords are shown in different colours,
and search matches are highlighted as well.

## Using it as a library

The parts of the editor can also be used from Python:

```python
from tera.syntax import select_syntax
from tera.highlight import highlight_line

syntax = select_syntax("example.py")
hl, open_comment = highlight_line("x = 42  # answer", syntax, False)
```

- `tera.syntax` holds the filetype table (`SYNTAXES`, `Syntax`, `HighlightFlag`) and
  `select_syntax(filename)`, which returns the matching `Syntax` or `None`.
- `tera.highlight` has `highlight_line(render, syntax, in_comment)`, which returns a list
  of `Highlight` values and whether a multi-line comment is still open, and
  `syntax_to_color(hl)`, which gives the ANSI colour code for a highlight.
- `tera.rows` has `Document`, which holds the rows of a buffer (`Row` objects) and keeps
  their tab-expanded rendering and highlighting current as they are edited.
- `tera.terminal` has `RawMode`, a context manager for raw terminal mode, `read_key` and
  `decode_key` for turning input bytes into key codes (`Key`), and `get_window_size`.
- `tera.editor.Editor` puts the whole editor together. It takes the screen size, a
  function that returns one key code per call and a function that receives each frame as
  bytes, so it can be driven without a terminal: `process_keypress(key)` handles one key
  and returns `False` when the editor should quit, and `draw_screen()` returns the
  current frame.