"""
End-to-end render tests

Tests the full pipeline: content directory → ContentLoader → TagsPlugin → JSON output

Validates that a small site renders tag-filtered page lists per page and
that each render request accumulates its own tags.
"""

import json
import pytest
from pathlib import Path

from pagetags.__main__ import env_check, content_load, pages_render, results_report
from pagetags.models import ProgramState, pipeline


SITE = {
    "index.md": "---\nTitle: Home\nFilter: news\nFilterGetParam: tag\n---\nFront page\n",
    "posts/first.md": "---\nTitle: First\nTags: news\n---\nFirst post\n",
    "posts/second.md": "---\nTitle: Second\nTags: blog, news\n---\nSecond post\n",
    "posts/third.md": "---\nTitle: Third\nTags: misc\n---\nThird post\n",
}


@pytest.fixture
def site(tmp_path):
    """Content directory with a filtered front page and three posts"""
    content = tmp_path / "content"
    for name, text in SITE.items():
        path = content / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return content


def state_make(site: Path, tmp_path: Path, **options) -> ProgramState:
    return ProgramState(
        inputdir=site,
        outputdir=tmp_path / "out",
        verbosity=0,
        outputFile="pages.json",
        **options,
    )


def run(state: ProgramState) -> ProgramState:
    return pipeline(state, env_check, content_load, pages_render, results_report)


class TestSinglePage:
    """Test rendering one requested page"""

    def test_front_page_filtered(self, site, tmp_path):
        """Front page lists only news posts"""
        final = run(state_make(site, tmp_path, currentPage="index"))

        output = tmp_path / "out" / "pages.json"
        assert output.exists()

        payload = json.loads(output.read_text())
        assert payload["current_page"] == "index"
        assert [p["id"] for p in payload["pages"]] == ["posts/first", "posts/second"]
        assert payload["all_tags"] == ["news", "blog", " news"]
        assert final.renderResults == {"pages.json": payload}

    def test_meta_normalised_in_output(self, site, tmp_path):
        """Page meta in the output carries tag lists"""
        run(state_make(site, tmp_path, currentPage="index"))
        payload = json.loads((tmp_path / "out" / "pages.json").read_text())

        second = payload["pages"][1]
        assert second["url"] == "/posts/second"
        assert second["meta"]["tags"] == ["blog", " news"]
        assert second["meta"]["filter"] == []
        assert second["meta"]["title"] == "Second"

    def test_query_parameter(self, site, tmp_path):
        """Query parameter named by FilterGetParam widens the filter"""
        run(state_make(site, tmp_path, currentPage="index", query=["tag=misc"]))
        payload = json.loads((tmp_path / "out" / "pages.json").read_text())

        assert [p["id"] for p in payload["pages"]] == [
            "posts/first",
            "posts/second",
            "posts/third",
        ]
        assert payload["all_tags"] == ["news", "blog", " news", "misc"]

    def test_unrelated_query_parameter(self, site, tmp_path):
        """Query parameters not named by the page are ignored"""
        run(state_make(site, tmp_path, currentPage="index", query=["other=misc"]))
        payload = json.loads((tmp_path / "out" / "pages.json").read_text())

        assert [p["id"] for p in payload["pages"]] == ["posts/first", "posts/second"]

    def test_unfiltered_page(self, site, tmp_path):
        """Page without filter lists every page and no tags"""
        run(state_make(site, tmp_path, currentPage="posts/third"))
        payload = json.loads((tmp_path / "out" / "pages.json").read_text())

        assert len(payload["pages"]) == 4
        assert payload["all_tags"] == []


class TestAllPages:
    """Test rendering every page as its own request"""

    def test_one_output_per_page(self, site, tmp_path):
        """Each page gets its own output file"""
        final = run(state_make(site, tmp_path))

        names = sorted(p.name for p in (tmp_path / "out").iterdir())
        assert names == [
            "index.json",
            "posts__first.json",
            "posts__second.json",
            "posts__third.json",
        ]
        assert len(final.renderResults) == 4

    def test_requests_isolated(self, site, tmp_path):
        """Tags accumulated for one page don't leak into the next"""
        final = run(state_make(site, tmp_path))

        assert final.renderResults["index.json"]["all_tags"] == ["news", "blog", " news"]
        for name in ("posts__first.json", "posts__second.json", "posts__third.json"):
            assert final.renderResults[name]["all_tags"] == []


class TestErrors:
    """Test pipeline failures"""

    def test_missing_content_dir(self, tmp_path):
        """Missing content directory exits with status 1"""
        state = state_make(tmp_path / "missing", tmp_path)
        with pytest.raises(SystemExit) as exc:
            run(state)
        assert exc.value.code == 1

    def test_malformed_query(self, site, tmp_path):
        """Query argument without '=' exits with status 1"""
        with pytest.raises(SystemExit) as exc:
            run(state_make(site, tmp_path, query=["tag"]))
        assert exc.value.code == 1

    def test_unknown_current_page(self, site, tmp_path):
        """Unknown --currentPage exits with status 1"""
        with pytest.raises(SystemExit) as exc:
            run(state_make(site, tmp_path, currentPage="nope"))
        assert exc.value.code == 1

    def test_invalid_meta_block(self, site, tmp_path):
        """Broken meta block exits with status 1"""
        (site / "broken.md").write_text("---\nTags: [x\n---\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            run(state_make(site, tmp_path))
        assert exc.value.code == 1

    def test_output_name_collision(self, site, tmp_path):
        """Two pages flattening to the same output file exit with status 1"""
        (site / "posts__first.md").write_text("Clash\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            run(state_make(site, tmp_path))
        assert exc.value.code == 1
        assert not (tmp_path / "out" / "posts__first.json").exists()

    def test_collision_ignored_for_single_page(self, site, tmp_path):
        """Single-page mode writes one file, so flattened names can't clash"""
        (site / "posts__first.md").write_text("Clash\n", encoding="utf-8")
        final = run(state_make(site, tmp_path, currentPage="posts/first"))

        assert list(final.renderResults) == ["pages.json"]
