from pathlib import Path

from rulematch.utils import dump_json_file, load_json_file, shorten_home


def test_missing_and_blank_files_have_no_payload(tmp_path: Path) -> None:
    assert load_json_file(tmp_path / "absent.json") == (None, None)
    blank = tmp_path / "blank.json"
    blank.write_text("  \n", encoding="utf-8")
    assert load_json_file(blank) == (None, None)


def test_decode_problem_names_line_and_column(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{\n  "workers": ,\n}', encoding="utf-8")
    payload, problem = load_json_file(path)
    assert payload is None
    assert problem is not None
    assert "line 2" in problem


def test_dump_replaces_file_and_leaves_no_temp(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    dump_json_file(path, {"workers": 1})
    dump_json_file(path, {"workers": 2})
    assert load_json_file(path) == ({"workers": 2}, None)
    assert path.read_text(encoding="utf-8").endswith("\n")
    assert [item.name for item in path.parent.iterdir()] == ["config.json"]


def test_shorten_home_rewrites_embedded_paths(tmp_path: Path) -> None:
    message = f"{tmp_path}/rules/a.yaml:3: rule 'x': duplicate of {tmp_path}/rules/b.yaml"
    assert shorten_home(message) == "~/rules/a.yaml:3: rule 'x': duplicate of ~/rules/b.yaml"
    assert shorten_home(tmp_path) == "~"
    assert shorten_home("/elsewhere/file") == "/elsewhere/file"
