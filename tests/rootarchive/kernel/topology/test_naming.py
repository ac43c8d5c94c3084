"""Tests for slug generation and unique name allocation."""

import pytest

from rootarchive.kernel.exceptions import NameAllocationError
from rootarchive.kernel.topology.context import TopologyContext
from rootarchive.kernel.topology.naming import (
    UNTITLED,
    aallocate_name,
    candidate_name,
    slugify,
)


class TestSlugify:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("My Post!", "my-post"),
            ("  --Hello__World--  ", "hello-world"),
            ("Café Déjà Vu", "cafe-deja-vu"),
            ("2024 Notes", "2024-notes"),
            ("", UNTITLED),
            (None, UNTITLED),
            ("!!!", UNTITLED),
            ("日本語", UNTITLED),
        ],
    )
    def test_slugify(self, title, expected):
        assert slugify(title) == expected

    def test_slug_is_a_single_path_segment(self):
        assert "/" not in slugify("a/b/../c")


def test_candidate_names():
    assert [candidate_name("my-post", n) for n in (1, 2, 3)] == [
        "my-post",
        "my-post-2",
        "my-post-3",
    ]


class TestAllocateName:
    @pytest.mark.asyncio
    async def test_first_candidate_when_free(self, ctx, root):
        await root.amkdir("/library")
        assert await aallocate_name(ctx, "/library", "My Post!") == "my-post"

    @pytest.mark.asyncio
    async def test_skips_taken_names(self, ctx, root, engine):
        await root.amkdir("/library")
        other = await engine.acreate_archive()
        await root.amount("/library/my-post", other.key)
        assert await aallocate_name(ctx, "/library", "My Post!") == "my-post-2"

        await root.awrite_file("/library/my-post-2", "plain files count too")
        assert await aallocate_name(ctx, "/library", "My Post!") == "my-post-3"

    @pytest.mark.asyncio
    async def test_empty_title_is_untitled(self, ctx, root):
        await root.amkdir("/library")
        assert await aallocate_name(ctx, "/library", "") == "untitled"

    @pytest.mark.asyncio
    async def test_exhaustion_raises(self, ctx, root, log_capture):
        await root.amkdir("/library")
        await root.amkdir("/library/my-post")
        await root.amkdir("/library/my-post-2")

        with pytest.raises(NameAllocationError) as exc_info:
            await aallocate_name(ctx, "/library", "My Post!", max_attempts=2)

        assert exc_info.value.attempts == 2
        assert exc_info.value.containing_path == "/library"
        assert any(r["level"] == "CRITICAL" for r in log_capture)

    @pytest.mark.asyncio
    async def test_limit_defaults_to_context_setting(self, engine, root):
        ctx = TopologyContext(archive=root, engine=engine, max_name_attempts=1)
        await root.amkdir("/library")
        await root.amkdir("/library/untitled")

        with pytest.raises(NameAllocationError):
            await aallocate_name(ctx, "/library", None)

    @pytest.mark.asyncio
    async def test_probe_errors_count_as_free(self, ctx, root):
        await root.amkdir("/library")
        await root.amkdir("/library/my-post")
        root.inject_failure("stat", "/library/my-post")

        assert await aallocate_name(ctx, "/library", "My Post!") == "my-post"
