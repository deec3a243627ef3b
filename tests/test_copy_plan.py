"""Tests for the cp plan generators."""

import os

import pytest

from mirrorcp.client import Content, ContentEvent, ContentKind
from mirrorcp.exceptions import (
    BackendError,
    InvalidArgument,
    InvalidSource,
    InvalidTarget,
    ListingError,
    SourceIsNotDir,
    SourceIsNotFile,
    SourceListEmpty,
    SourceNotFound,
    SourceNotRecursive,
)
from mirrorcp.plan import (
    CopyShape,
    prepare_copy_a,
    prepare_copy_b,
    prepare_copy_c,
    prepare_copy_d,
    prepare_copy_urls,
)


def pairs(instructions):
    out = []
    for inst in instructions:
        assert inst.ok, inst.error
        out.append((inst.source.url, inst.target.url))
    return out


def errors(instructions):
    return [inst.error for inst in instructions if not inst.ok]


class TestFileToFile:
    def test_single_instruction(self, source_tree, tmp_path):
        src = os.path.join(source_tree, "a.txt")
        dst = str(tmp_path / "copy.txt")
        insts = list(prepare_copy_a(src, dst))
        assert len(insts) == 1
        assert insts[0].source.url == src
        assert insts[0].source.size == 5
        assert insts[0].target.url == dst

    def test_missing_source(self, tmp_path):
        [err] = errors(prepare_copy_a(str(tmp_path / "nope"), str(tmp_path / "x")))
        assert isinstance(err, SourceNotFound)

    def test_source_is_directory(self, source_tree, tmp_path):
        [err] = errors(prepare_copy_a(source_tree, str(tmp_path / "x")))
        assert isinstance(err, SourceIsNotFile)

    def test_invalid_target(self, source_tree):
        [err] = errors(prepare_copy_a(os.path.join(source_tree, "a.txt"), "ftp://h/b/x"))
        assert isinstance(err, InvalidTarget)

    def test_invalid_source(self, tmp_path):
        [err] = errors(prepare_copy_a("ftp://h/b/x", str(tmp_path / "x")))
        assert isinstance(err, InvalidSource)


class TestFileToDirectory:
    def test_keeps_basename(self, source_tree, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        src = os.path.join(source_tree, "sub", "b.txt")
        assert pairs(prepare_copy_b(src, str(out))) == [(src, str(out / "b.txt"))]

    def test_remote_target(self, source_tree):
        src = os.path.join(source_tree, "a.txt")
        assert pairs(prepare_copy_b(src, "https://h/bkt/dir/")) == [
            (src, "https://h/bkt/dir/a.txt"),
        ]


class TestRecursive:
    def test_every_file_once(self, source_tree, tmp_path):
        out = str(tmp_path / "out")
        result = pairs(prepare_copy_c(source_tree + "/...", out))
        assert result == [
            (os.path.join(source_tree, "a.txt"), os.path.join(out, "a.txt")),
            (os.path.join(source_tree, "sub", "b.txt"), os.path.join(out, "sub", "b.txt")),
        ]

    @pytest.mark.parametrize("suffix", ["...", "/...", "/.../"])
    def test_marker_forms(self, source_tree, tmp_path, suffix):
        out = str(tmp_path / "out")
        result = pairs(prepare_copy_c(source_tree + suffix, out))
        assert [t for _, t in result] == [
            os.path.join(out, "a.txt"),
            os.path.join(out, "sub", "b.txt"),
        ]

    def test_no_directory_instructions(self, tmp_path, make_tree):
        root = make_tree(tmp_path / "t", {"empty": None, "x/y/z.txt": "z"})
        result = pairs(prepare_copy_c(root + "/...", "https://h/bkt/"))
        assert result == [(os.path.join(root, "x", "y", "z.txt"), "https://h/bkt/x/y/z.txt")]

    def test_sizes_carried(self, source_tree, tmp_path):
        insts = list(prepare_copy_c(source_tree + "/...", str(tmp_path)))
        assert [i.source.size for i in insts] == [5, 3]

    def test_not_recursive(self, source_tree, tmp_path):
        [err] = errors(prepare_copy_c(source_tree, str(tmp_path)))
        assert isinstance(err, SourceNotRecursive)

    def test_missing(self, tmp_path):
        [err] = errors(prepare_copy_c(str(tmp_path / "nope") + "/...", str(tmp_path)))
        assert isinstance(err, SourceNotFound)

    def test_file_source(self, source_tree, tmp_path):
        [err] = errors(prepare_copy_c(os.path.join(source_tree, "a.txt") + "...", str(tmp_path)))
        assert isinstance(err, SourceIsNotDir)


class TestMultiSource:
    def test_mixed_sources_in_order(self, source_tree, tmp_path, make_tree):
        other = make_tree(tmp_path / "other", {"c.txt": "c"})
        out = tmp_path / "out"
        out.mkdir()
        sources = [os.path.join(source_tree, "a.txt"), other + "/..."]
        assert [t for _, t in pairs(prepare_copy_d(sources, str(out)))] == [
            str(out / "a.txt"),
            str(out / "c.txt"),
        ]

    def test_errors_do_not_stop_the_plan(self, source_tree, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        sources = [str(tmp_path / "nope"), os.path.join(source_tree, "a.txt")]
        insts = list(prepare_copy_d(sources, str(out)))
        assert isinstance(insts[0].error, SourceNotFound)
        assert insts[1].ok
        assert insts[1].target.url == str(out / "a.txt")

    def test_empty(self, tmp_path):
        [err] = errors(prepare_copy_d([], str(tmp_path)))
        assert isinstance(err, SourceListEmpty)


class TestPrepareCopyUrls:
    def test_dispatches_on_shape(self, source_tree, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        src = os.path.join(source_tree, "a.txt")
        assert pairs(prepare_copy_urls([src], str(out))) == [(src, str(out / "a.txt"))]
        assert pairs(prepare_copy_urls([src], str(out / "renamed.txt"))) == [
            (src, str(out / "renamed.txt")),
        ]

    def test_explicit_shape(self, source_tree, tmp_path):
        insts = list(prepare_copy_urls(
            [source_tree + "/..."], str(tmp_path / "out"),
            shape=CopyShape.RECURSIVE_DIR_TO_DIRECTORY,
        ))
        assert len(insts) == 2

    def test_invalid(self, tmp_path):
        [err] = errors(prepare_copy_urls([], str(tmp_path)))
        assert isinstance(err, InvalidArgument)

    def test_lazy(self, tmp_path):
        # Nothing is looked up until the generator is advanced.
        gen = prepare_copy_urls([str(tmp_path / "nope")], str(tmp_path / "x"))
        assert not (tmp_path / "x").exists()
        [err] = errors(gen)
        assert isinstance(err, SourceNotFound)


class TestPartialFailure:
    def test_listing_error_mid_stream(self, monkeypatch, static_client, tmp_path):
        root = "https://h/src/"
        err = ListingError(root + "b/", "connection reset")
        client = static_client(root, [
            ContentEvent(content=Content(root + "a.txt", ContentKind.FILE, 1)),
            ContentEvent(error=err),
            ContentEvent(content=Content(root + "c.txt", ContentKind.FILE, 3)),
        ])
        monkeypatch.setattr(
            "mirrorcp.plan._copy.url_stat",
            lambda url, config=None: (client, client.stat()),
        )
        out = str(tmp_path / "out")
        insts = list(prepare_copy_c(root + "...", out))
        assert len(insts) == 3
        assert (insts[0].source.url, insts[0].target.url) == (root + "a.txt", os.path.join(out, "a.txt"))
        assert insts[1].error is err
        assert (insts[2].source.url, insts[2].target.url) == (root + "c.txt", os.path.join(out, "c.txt"))

    def test_unreadable_source_yields_error(self, tmp_path):
        insts = list(prepare_copy_a(str(tmp_path / ("x" * 5000)), str(tmp_path / "out")))
        [err] = errors(insts)
        assert isinstance(err, BackendError)

    def test_unusable_target_does_not_raise(self, source_tree, tmp_path):
        src = os.path.join(source_tree, "a.txt")
        target = str(tmp_path / ("y" * 5000))
        assert pairs(prepare_copy_urls([src], target)) == [(src, target)]
