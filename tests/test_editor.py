import pytest

from tera.editor import Editor
from tera.highlight import Highlight
from tera.terminal import Key, ctrl_key

ENTER = 13
ESC = 27


def make_editor(keys=(), rows=10, cols=40, path=None):
    key_iter = iter(keys)
    output = []
    editor = Editor(rows, cols, lambda: next(key_iter), output.append)
    if path is not None:
        editor.open(str(path))
    editor.ln_width = editor.doc.line_number_width()
    editor.cx = editor.ln_width + 1
    return editor, output


def type_text(editor, text):
    for ch in text:
        editor.process_keypress(ord(ch))


def test_typing_into_empty_document():
    editor, _ = make_editor()
    type_text(editor, "hi")
    assert editor.doc.to_string() == "hi\n"
    assert editor.doc.dirty > 0


def test_newline_splits_and_backspace_joins():
    editor, _ = make_editor()
    type_text(editor, "ab")
    editor.process_keypress(Key.ARROW_LEFT)
    editor.process_keypress(ENTER)
    assert editor.doc.to_string() == "a\nb\n"
    assert editor.cy == 1
    assert editor.cx == editor.ln_width + 1
    editor.process_keypress(Key.BACKSPACE)
    assert editor.doc.to_string() == "ab\n"
    assert editor.cy == 0


def test_backspace_at_document_start_does_nothing():
    editor, _ = make_editor()
    type_text(editor, "x")
    editor.process_keypress(Key.HOME_KEY)
    editor.process_keypress(Key.BACKSPACE)
    assert editor.doc.to_string() == "x\n"


def test_open_strips_line_endings(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(b"one\r\ntwo\n")
    editor, _ = make_editor(path=path)
    assert editor.doc.to_string() == "one\ntwo\n"
    assert editor.doc.dirty == 0


def test_open_missing_file_raises(tmp_path):
    editor, _ = make_editor()
    with pytest.raises(FileNotFoundError):
        editor.open(str(tmp_path / "missing.txt"))


def test_arrow_right_wraps_to_next_line(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("ab\ncd\n")
    editor, _ = make_editor(path=path)
    for _ in range(3):
        editor.process_keypress(Key.ARROW_RIGHT)
    assert editor.cy == 1
    assert editor.cx == editor.ln_width + 1


def test_end_key_moves_to_line_end(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("hello\n")
    editor, _ = make_editor(path=path)
    editor.process_keypress(Key.END_KEY)
    assert editor.cx == len("hello") + editor.ln_width + 1


def test_save_round_trip(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("hi\n")
    editor, _ = make_editor(path=path)
    editor.process_keypress(Key.END_KEY)
    type_text(editor, "!")
    editor.process_keypress(ctrl_key("s"))
    assert path.read_text() == "hi!\n"
    assert editor.doc.dirty == 0
    assert editor.status_message == "4 bytes written to disk"


def test_save_prompts_for_name(tmp_path):
    target = tmp_path / "new.py"
    keys = [ord(ch) for ch in str(target)] + [ENTER]
    editor, _ = make_editor(keys)
    editor.doc.insert_row(0, "pass")
    editor.save()
    assert editor.filename == str(target)
    assert target.read_text() == "pass\n"
    assert editor.doc.syntax.filetype == "Python"


def test_save_aborted_with_escape():
    editor, _ = make_editor([ord("x"), ESC])
    editor.doc.insert_row(0, "data")
    editor.save()
    assert editor.filename is None
    assert editor.status_message == "Save aborted"


def test_save_to_unwritable_location_reports_error(tmp_path):
    editor, _ = make_editor()
    editor.filename = str(tmp_path / "no_such_dir" / "file.txt")
    editor.save()
    assert editor.status_message.startswith("Can't save! I/O error: ")


def test_quit_with_unsaved_changes_needs_second_press():
    editor, output = make_editor()
    type_text(editor, "x")
    assert editor.process_keypress(ctrl_key("q")) is True
    assert editor.status_message.startswith("WARNING: File has unsaved changes.")
    assert editor.process_keypress(ctrl_key("q")) is False
    assert output[-1] == b"\x1b[2J\x1b[H"


def test_quit_warning_resets_after_other_key():
    editor, _ = make_editor()
    type_text(editor, "x")
    assert editor.process_keypress(ctrl_key("q")) is True
    editor.process_keypress(Key.ARROW_LEFT)
    assert editor.process_keypress(ctrl_key("q")) is True


def test_quit_clean_document_exits_immediately():
    editor, _ = make_editor()
    assert editor.process_keypress(ctrl_key("q")) is False


def test_find_moves_to_match(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("alpha\nbeta\ngamma\n")
    editor, _ = make_editor([ord("g"), ord("a"), ENTER], path=path)
    editor.find()
    assert editor.cy == 2
    assert all(hl != Highlight.MATCH for hl in editor.doc[2].hl)


def test_find_arrow_goes_to_next_match(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("ab\nab\nab\n")
    editor, _ = make_editor([ord("a"), ord("b"), Key.ARROW_DOWN, ENTER], path=path)
    editor.find()
    assert editor.cy == 1


def test_find_cancel_restores_position(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("alpha\nbeta\ngamma\n")
    editor, _ = make_editor([ord("g"), ESC], path=path)
    start = (editor.cx, editor.cy)
    editor.find()
    assert (editor.cx, editor.cy) == start
    assert all(hl != Highlight.MATCH for hl in editor.doc[2].hl)


def test_find_highlights_match_while_prompting(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("alpha\nbeta\n")
    seen = []
    editor, _ = make_editor(path=path)
    keys = iter([ord("e"), ord("t"), ENTER])

    def next_key():
        seen.append(list(editor.doc[1].hl))
        return next(keys)

    editor.read_key = next_key
    editor.find()
    assert editor.cy == 1
    assert seen[-1][1:3] == [Highlight.MATCH, Highlight.MATCH]
    assert all(hl != Highlight.MATCH for hl in editor.doc[1].hl)


def test_welcome_message_on_empty_document():
    editor, output = make_editor()
    editor.refresh_screen()
    frame = output[-1]
    assert b"Tera Editor -- Version 0.0.1" in frame
    assert b"[No Name] - 0 lines" in frame
    assert frame.startswith(b"\x1b[?25l\x1b[H")
    assert frame.endswith(b"\x1b[?25h")


def test_line_numbers_drawn(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("hello\n")
    editor, output = make_editor(path=path)
    editor.refresh_screen()
    assert b"\x1b[30m1 \x1b[39mhello" in output[-1]


def test_control_characters_drawn_inverted(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"\x01\n")
    editor, output = make_editor(path=path)
    editor.refresh_screen()
    assert b"\x1b[7mA\x1b[m" in output[-1]


def test_keyword_coloured_in_c_file(tmp_path):
    path = tmp_path / "main.c"
    path.write_text("int x;\n")
    editor, output = make_editor(path=path)
    editor.refresh_screen()
    frame = output[-1]
    assert b"\x1b[32mint" in frame
    assert b"C | 1/1" in frame


def test_modified_flag_in_status_bar():
    editor, _ = make_editor()
    type_text(editor, "x")
    editor.scroll()
    assert b"(modified)" in editor.draw_screen()


def test_status_message_expires():
    editor, _ = make_editor()
    editor.clock = lambda: 100.0
    editor.set_status_message("hello there")
    assert b"hello there" in editor.draw_screen()
    editor.clock = lambda: 106.0
    assert b"hello there" not in editor.draw_screen()


def test_scroll_keeps_cursor_visible(tmp_path):
    path = tmp_path / "long.txt"
    path.write_text("".join(f"line{n}\n" for n in range(40)))
    editor, _ = make_editor(rows=10, path=path)
    for _ in range(25):
        editor.process_keypress(Key.ARROW_DOWN)
    editor.scroll()
    assert editor.rowoff <= editor.cy < editor.rowoff + editor.screenrows
    editor.process_keypress(Key.PAGE_UP)
    editor.scroll()
    assert editor.rowoff <= editor.cy < editor.rowoff + editor.screenrows


def test_page_down_moves_forward(tmp_path):
    path = tmp_path / "long.txt"
    path.write_text("".join(f"line{n}\n" for n in range(40)))
    editor, _ = make_editor(rows=10, path=path)
    editor.process_keypress(Key.PAGE_DOWN)
    assert editor.cy > editor.screenrows - 1
    assert editor.cy <= len(editor.doc)


def test_prompt_backspace_edits_text():
    editor, _ = make_editor([ord("a"), ord("b"), Key.BACKSPACE, ord("c"), ENTER])
    assert editor.prompt("Name: {}", None) == "ac"


def test_prompt_ignores_enter_on_empty_text():
    editor, _ = make_editor([ENTER, ord("z"), ENTER])
    assert editor.prompt("Name: {}", None) == "z"