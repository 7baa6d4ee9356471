"""
Command-line tests
"""
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from sitemap_builder.cli import main
from sitemap_builder.document import SitemapDocument


def test_init_then_build(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["init"]) == 0
    assert (tmp_path / "sitemap.config.yml").exists()
    # second init refuses to overwrite
    assert main(["init"]) == 1

    assert main(["build"]) == 0
    doc = SitemapDocument(tmp_path / "sitemap.xml")
    assert [e.loc for e in doc] == [
        "https://example.com/",
        "https://example.com/about/",
        "https://example.com/docs/",
    ]
    assert doc.entries[0].priority == 1.0
    assert doc.entries[1].changefreq == "weekly"
    assert "[OK] Wrote 3 urls" in capsys.readouterr().out


def test_build_dry_run(tmp_path: Path, capsys):
    config = tmp_path / "c.yml"
    config.write_text("urls:\n  - https://example.com/\n", encoding="utf-8")
    assert main(["build", "-c", str(config), "-o", str(tmp_path / "x.xml"), "--dry-run"]) == 0
    out = capsys.readouterr().out
    assert "<loc>https://example.com/</loc>" in out
    assert not (tmp_path / "x.xml").exists()


def test_build_missing_config(tmp_path: Path, capsys):
    assert main(["build", "-c", str(tmp_path / "missing.yml")]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_build_invalid_config(tmp_path: Path, capsys):
    config = tmp_path / "c.yml"
    config.write_text("urls:\n  - loc: https://example.com/\n    priority: 3\n", encoding="utf-8")
    assert main(["build", "-c", str(config)]) == 1
    assert "'urls[0].priority'" in capsys.readouterr().err


def test_add_remove_show(tmp_path: Path, capsys):
    sitemap = tmp_path / "sitemap.xml.gz"
    assert main(["add", str(sitemap), "https://example.com/", "https://example.com/a",
                 "--changefreq", "daily", "--priority", "0.7"]) == 0
    assert main(["add", str(sitemap), "https://example.com/b"]) == 0
    doc = SitemapDocument(sitemap)
    assert len(doc) == 3
    assert doc.entries[0].changefreq == "daily"
    assert doc.entries[2].priority is None

    assert main(["remove", str(sitemap), "https://example.com/a"]) == 0
    assert main(["remove", str(sitemap), "https://example.com/zzz"]) == 1

    capsys.readouterr()
    assert main(["show", str(sitemap)]) == 0
    out = capsys.readouterr().out
    assert "https://example.com/  changefreq=daily  priority=0.7" in out
    assert "https://example.com/a" not in out
    assert "# 2 urls" in out


def test_add_rejects_bad_url(tmp_path: Path, capsys):
    sitemap = tmp_path / "sitemap.xml"
    assert main(["add", str(sitemap), "notaurl"]) == 1
    assert "[ERROR]" in capsys.readouterr().err
    assert not sitemap.exists()


def test_validate(tmp_path: Path, capsys):
    good = tmp_path / "good.xml"
    good.write_text(
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        "<url><loc>https://example.com/</loc><priority>0.5</priority></url></urlset>",
        encoding="utf-8",
    )
    bad = tmp_path / "bad.xml"
    bad.write_text(
        "<urlset><url><loc>https://example.com/</loc><priority>7</priority></url></urlset>",
        encoding="utf-8",
    )
    assert main(["validate", str(good)]) == 0
    assert main(["validate", str(bad)]) == 1
    assert "1 invalid values" in capsys.readouterr().err


def test_show_missing_file(tmp_path: Path, capsys):
    assert main(["show", str(tmp_path / "nope.xml")]) == 1
    assert "Sitemap not found" in capsys.readouterr().err


def test_show_malformed_file(tmp_path: Path, capsys):
    broken = tmp_path / "broken.xml"
    broken.write_text("<urlset><url>", encoding="utf-8")
    assert main(["show", str(broken)]) == 1
    assert "[ERROR]" in capsys.readouterr().err
