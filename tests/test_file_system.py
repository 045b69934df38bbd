"""FileSystem 的单元测试 (对外的布尔接口)."""

import gc
import logging
import sys
import weakref

import pytest

from tree_file_system import _dir_tree_handler
from tree_file_system.errors import FileSystemClosed, OutOfMemory
from tree_file_system.file_system import FileSystem, init

SLASHED_NAMES = ["a/b", "a/", "/a", "//", "a/b/c"]


@pytest.fixture
def fs():
    with FileSystem() as file_system:
        yield file_system


class TestInit:
    """init 之后的状态."""

    def test_pwd_is_root(self, fs):
        assert fs.pwd() == "/"
        assert fs.current_dir is fs.root
        assert fs.ls("") == (True, [])

    def test_module_level_init(self):
        file_system = init()

        assert isinstance(file_system, FileSystem)
        assert file_system.root.name == "root"
        file_system.teardown()

    def test_handles_do_not_share_state(self):
        with FileSystem() as first, FileSystem() as second:
            first.touch("x")
            first.mkdir("d")
            first.cd("d")

            assert second.pwd() == "/"
            assert second.ls("") == (True, [])


class TestTouch:
    """touch 的行为."""

    @pytest.mark.parametrize("first, second", [("a", "b"), ("b", "a"), ("Z", "a"), ("ab", "a")])
    def test_listing_is_sorted_regardless_of_creation_order(self, fs, first, second):
        fs.touch(first)
        fs.touch(second)

        assert fs.ls("") == (True, sorted([first, second]))

    def test_retouch_only_bumps_timestamp(self, fs):
        fs.touch("x")
        fs.touch("y")

        assert fs.touch("x")

        assert len(fs.current_dir.files) == 2
        assert fs.get_file("x").timestamp == 2
        assert fs.get_file("y").timestamp == 1

    def test_touch_twice_then_list(self, fs):
        assert fs.touch("x")
        assert fs.touch("x")

        assert fs.ls("") == (True, ["x"])
        assert fs.get_file("x").timestamp == 2
        assert fs.ls("x") == (True, ["x 2"])

    def test_directory_shadows_file(self, fs):
        assert fs.mkdir("d")

        assert fs.touch("d")

        assert fs.get_file("d") is None
        assert fs.ls("") == (True, ["d/"])

    @pytest.mark.parametrize("name", ["", ".", "..", "/"] + SLASHED_NAMES)
    def test_invalid_names(self, fs, name):
        assert not fs.touch(name)
        assert fs.ls("") == (True, [])


class TestMkdir:
    """mkdir 的行为."""

    def test_mkdir_is_idempotent(self, fs):
        assert fs.mkdir("a")
        fs.cd("a")
        fs.touch("inside")
        fs.cd("..")

        assert fs.mkdir("a")

        assert len(fs.current_dir.subdirs) == 1
        assert fs.ls("a") == (True, ["inside"])

    def test_file_does_not_block_directory(self, fs):
        fs.touch("a")

        assert fs.mkdir("a")
        assert fs.ls("") == (True, ["a", "a/"])

    @pytest.mark.parametrize("name", ["", ".", "..", "/"] + SLASHED_NAMES)
    def test_invalid_names(self, fs, name):
        assert not fs.mkdir(name)
        assert fs.ls("") == (True, [])


class TestCd:
    """cd 和 pwd."""

    def test_parent_of_root(self, fs):
        assert fs.cd("..")
        assert fs.pwd() == "/"

    def test_round_trip(self, fs):
        assert fs.mkdir("a")
        assert fs.cd("a")
        assert fs.pwd() == "/a"
        assert fs.mkdir("b")
        assert fs.cd("..")

        assert fs.ls("a") == (True, ["b/"])

    def test_dot_and_root(self, fs):
        fs.mkdir("a")
        fs.cd("a")
        fs.mkdir("b")
        fs.cd("b")

        assert fs.cd(".")
        assert fs.pwd() == "/a/b"
        assert fs.cd("/")
        assert fs.pwd() == "/"

    @pytest.mark.parametrize("name", ["", "missing", "f"] + SLASHED_NAMES)
    def test_failures_keep_cursor(self, fs, name):
        fs.mkdir("a")
        fs.touch("f")
        fs.cd("a")
        fs.touch("f")

        assert not fs.cd(name)
        assert fs.pwd() == "/a"


class TestLs:
    """ls 的行为."""

    def test_merge_of_files_and_directories(self, fs):
        fs.touch("b")
        fs.mkdir("a")
        fs.touch("c")

        assert fs.ls("") == (True, ["a/", "b", "c"])
        assert fs.ls(".") == (True, ["a/", "b", "c"])

    def test_parent_and_root(self, fs):
        fs.touch("top")
        fs.mkdir("a")
        fs.cd("a")
        fs.mkdir("b")
        fs.cd("b")

        assert fs.ls("..") == (True, ["b/"])
        assert fs.ls("/") == (True, ["a/", "top"])
        fs.cd("..")
        assert fs.ls("..") == (True, ["a/", "top"])

    def test_parent_of_root_is_empty(self, fs):
        fs.touch("x")

        assert fs.ls("..") == (True, [])

    def test_directory_lookup_preferred_over_file(self, fs):
        fs.touch("x")
        fs.mkdir("x")
        fs.cd("x")
        fs.touch("inner")
        fs.cd("..")

        assert fs.ls("x") == (True, ["inner"])

    def test_missing(self, fs):
        assert fs.ls("nothing") == (False, [])

    @pytest.mark.parametrize("name", SLASHED_NAMES)
    def test_slashed_names(self, fs, name):
        fs.mkdir("a")

        assert fs.ls(name) == (False, [])


class TestRm:
    """rm 的行为."""

    def test_removes_whole_subtree(self, fs):
        fs.mkdir("d")
        fs.cd("d")
        fs.touch("f")
        fs.mkdir("s")
        fs.cd("s")
        fs.touch("g")
        fs.cd("/")
        d_ref = weakref.ref(fs.root.subdirs.find("d"))
        f_ref = weakref.ref(d_ref().files.find("f"))
        s_ref = weakref.ref(d_ref().subdirs.find("s"))
        g_ref = weakref.ref(s_ref().files.find("g"))

        assert fs.rm("d")
        gc.collect()

        assert fs.ls("") == (True, [])
        assert not fs.cd("d")
        assert d_ref() is None
        assert f_ref() is None
        assert s_ref() is None
        assert g_ref() is None

    def test_removes_file(self, fs):
        fs.touch("a")
        fs.touch("b")

        assert fs.rm("a")
        assert fs.ls("") == (True, ["b"])

    def test_directory_first(self, fs):
        fs.touch("x")
        fs.mkdir("x")

        assert fs.rm("x")
        assert fs.ls("") == (True, ["x"])
        assert fs.rm("x")
        assert fs.ls("") == (True, [])

    def test_removes_deep_subtree(self, fs):
        depth = sys.getrecursionlimit() + 100
        for _ in range(depth):
            fs.mkdir("d")
            fs.cd("d")
        fs.cd("/")

        assert fs.rm("d")
        assert fs.ls("") == (True, [])

    def test_missing(self, fs):
        assert not fs.rm("nothing")

    @pytest.mark.parametrize("name", ["", ".", "..", "/"] + SLASHED_NAMES)
    def test_invalid_names(self, fs, name):
        fs.mkdir("a")

        assert not fs.rm(name)
        assert fs.ls("") == (True, ["a/"])


class TestTeardown:
    """teardown 以及之后的使用."""

    def test_operations_fail_after_teardown(self):
        file_system = FileSystem()
        file_system.mkdir("a")
        file_system.teardown()

        assert file_system.closed
        assert not file_system.touch("x")
        assert not file_system.mkdir("b")
        assert not file_system.cd("a")
        assert file_system.ls("") == (False, [])
        assert not file_system.rm("a")
        assert file_system.get_file("x") is None
        with pytest.raises(FileSystemClosed):
            file_system.pwd()

    def test_second_teardown_is_logged(self, caplog):
        file_system = FileSystem()
        file_system.teardown()

        with caplog.at_level(logging.WARNING, logger="tree_file_system.file_system"):
            file_system.teardown()

        levels = [record.levelno for record in caplog.records
                  if record.name == "tree_file_system.file_system"]
        assert levels == [logging.WARNING]

    def test_deep_tree(self):
        depth = sys.getrecursionlimit() + 100
        file_system = FileSystem()
        for _ in range(depth):
            assert file_system.mkdir("d")
            assert file_system.cd("d")
        deepest_ref = weakref.ref(file_system.current_dir)

        file_system.teardown()
        gc.collect()

        assert file_system.closed
        assert deepest_ref() is None

    def test_context_manager(self):
        with FileSystem() as file_system:
            file_system.touch("x")

        assert file_system.closed


class TestFailureReporting:
    """失败的原因只记录在日志里."""

    def test_rejection_is_logged_at_debug(self, fs, caplog):
        with caplog.at_level(logging.DEBUG, logger="tree_file_system.file_system"):
            assert not fs.rm("nothing")

        messages = [record.getMessage() for record in caplog.records
                    if record.name == "tree_file_system.file_system"]
        assert len(messages) == 1
        assert "rm('nothing')" in messages[0]

    def test_out_of_memory_propagates(self, fs, monkeypatch):
        def no_memory(name):
            raise MemoryError

        monkeypatch.setattr(_dir_tree_handler, "FileNode", no_memory)

        with pytest.raises(OutOfMemory):
            fs.touch("x")
        assert fs.ls("") == (True, [])
