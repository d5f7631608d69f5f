import importlib.util
import os

SCRIPT_PATH = os.path.join(os.path.dirname(__file__), '..', 'scripts', 'screen_watchlist.py')


def _load_script():
    spec = importlib.util.spec_from_file_location("screen_watchlist", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_prints_ranked_table(tmp_path, capsys, watchlist_html, headers, sample_rows):
    page = tmp_path / "watchlist.html"
    page.write_text(watchlist_html(headers, list(sample_rows.values())), encoding='utf-8')

    exit_code = _load_script().main([str(page), "--ruleset", "strict", "--only-ready"])
    out = capsys.readouterr().out

    assert exit_code == 0
    assert "RULESET: strict" in out
    assert "TLKM" in out
    assert "BBRI" not in out
    assert "1 passed, 2 failed, 0 not ready" in out


def test_missing_table_returns_error(tmp_path, capsys):
    page = tmp_path / "empty.html"
    page.write_text("<html><body></body></html>", encoding='utf-8')

    assert _load_script().main([str(page)]) == 1
    assert "No watchlist table" in capsys.readouterr().out
