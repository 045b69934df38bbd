"""该模块提供了对一个完全位于内存中的目录树的各种处理."""

# 标准库模块
from typing import Optional
from enum import Enum
import heapq
import logging
import weakref

# 第三方库模块 (无)

# 自定义模块
from ._utils.ordered_entries import OrderedEntries
from .errors import (
    FileSystemClosed,
    InvalidNamingConvention,
    OutOfMemory,
    PathIsNotDir,
    PathNotExists
)

logger = logging.getLogger(__name__)

# 用于设置的全局变量.
ROOT_DIR_NAME = "root"  # 设置根目录的名称.
PATH_SEPARATOR = "/"  # 设置路径分隔符 (同时也是目录在列表中的后缀).


# 枚举类
class SpecialName(Enum):
    """保留名称枚举."""
    CURRENT_DIR = '.'
    PARENT_DIR = '..'
    ROOT_DIR = '/'


SPECIAL_NAMES = frozenset(item.value for item in SpecialName)


# 结点类
class FileNode:
    """文件结点, 只有名称和一个整数时间戳 (没有内容)."""

    __slots__ = ('name', 'timestamp', '__weakref__')

    def __init__(self, name: str):
        self.name = name
        self.timestamp = 1

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, timestamp={self.timestamp})"


class DirNode:
    """目录结点.

    Notes:
        - 目录独占它的文件和子目录, 两者都按名称升序保存.
        - 对父目录只持有弱引用, 它只用于 `..` 的跳转, 不负责释放任何东西.
        - 根目录的 `path` 是空字符串, 显示时使用 `/`.
    """

    __slots__ = ('name', 'path', 'files', 'subdirs', '_parent_ref', '__weakref__')

    def __init__(self, name: str, path: str, parent: Optional['DirNode'] = None):
        self.name = name
        self.path = path
        self.files = OrderedEntries()
        self.subdirs = OrderedEntries()
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, path={self.display_path!r})"

    @property
    def parent(self) -> Optional['DirNode']:
        """父目录 (根目录或者已经脱离目录树的目录返回None)."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def display_path(self) -> str:
        """用于显示的绝对路径."""
        return self.path or PATH_SEPARATOR

    def detach(self) -> None:
        """断开与父目录的联系."""
        self._parent_ref = None


# 主类
class DirTreeHandler:
    """该类提供了对一个完全位于内存中的目录树的各种处理.

    ## 使用示例

    用法:

    ```python
    with DirTreeHandler() as dth:
        dth.mkdir('docs')
        dth.chdir('docs')
        dth.create_file('readme')
        # 打印当前目录路径
        print(dth.get_current_dir_path())
        # 打印当前目录的内容
        print(dth.get_dir_content(''))
    ```

    和用法:

    ```python
    dth = DirTreeHandler()
    try:
        dth.mkdir('docs')
        # 做一些其他的事儿...
    finally:
        dth.teardown()
    ```

    是等价的.

    Warnings:
        - 在调用了 `teardown` 之后, 请 **不要** 再使用这个实例, 之后的任何操作都会抛出 `FileSystemClosed`.

    Notes:
        - 放在最前面:
            - 所有的操作都只接受 **一个** 路径分量 (名称), 不支持 `a/b/c` 这样的多级路径.
            - **不支持** 并行.
            - 这里所有的异常都继承自 `FileSystemError`, 失败的操作不会改变目录树和当前目录.
        - 文件和目录的名称空间的检查是不对称的:
            - 创建文件时, 如果有同名的目录, 什么也不做 (不是错误).
            - 创建目录时, 只检查同名的目录, 不检查同名的文件.
        - 多个实例之间没有任何共享的状态.
    """

    # 内部使用的方法
    def __init__(self, root_name: str = ROOT_DIR_NAME):
        """创建一个只有根目录的目录树, 当前目录就是根目录.

        Args:
            root_name: 根目录的名称.
        """
        self._root = DirNode(root_name, '')
        self._current_dir = self._root
        logger.debug("创建了根目录'%s'", root_name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """在退出前释放整棵目录树 (如果还没有释放)."""
        if not self.closed:
            self.teardown()

    def __check_open(self) -> None:
        """检查目录树还没有被释放.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
        """
        if self._root is None:
            raise FileSystemClosed("该目录树已经被释放, 不能再使用")

    @staticmethod
    def __check_name(name: str) -> None:
        """检查一个待创建、待删除或待查找的结点的名称是不是合法的.

        Raises:
            InvalidNamingConvention: 如果名称是空的、是保留名称, 或者其中包含“/”.
        """
        if not name:
            raise InvalidNamingConvention("结点的名称不能是空的")
        if name in SPECIAL_NAMES:
            raise InvalidNamingConvention(f"'{name}'是保留名称, 不能作为结点的名称")
        if PATH_SEPARATOR in name:
            raise InvalidNamingConvention(f"结点的名称'{name}'中包含“/”")

    def __resolve_dir(self, name: str) -> Optional[DirNode]:
        """确定名称对应的目录 (允许使用保留名称).

        Returns:
            对应的目录结点.特别地, 如果当前目录是根目录, 对于 `..` 返回None.

        Raises:
            InvalidNamingConvention: 如果名称中包含“/”但不是“/”本身.
            PathIsNotDir: 如果该名称只对应当前目录中的一个文件.
            PathNotExists: 如果当前目录中没有该名称.
        """
        if not name or name == SpecialName.CURRENT_DIR.value:
            return self._current_dir
        if name == SpecialName.PARENT_DIR.value:
            return self._current_dir.parent
        if name == SpecialName.ROOT_DIR.value:
            return self._root
        if PATH_SEPARATOR in name:
            raise InvalidNamingConvention(f"不支持多级路径'{name}'")

        dir_node = self._current_dir.subdirs.find(name)
        if dir_node is None:
            if name in self._current_dir.files:
                raise PathIsNotDir(f"'{name}'存在但不对应一个目录")
            raise PathNotExists(f"当前目录中没有名为'{name}'的目录")
        return dir_node

    @staticmethod
    def __remove_dir(dir_node: DirNode) -> int:
        """释放一个目录中的所有文件和子目录, 以及这个目录本身 (后序).

        Warnings:
            * 调用前该目录应当已经从它的父目录中摘下.

        Returns:
            被释放的结点的数量 (包括这个目录本身).

        Notes:
            * 使用显式的栈而不是递归, 目录树的深度不受解释器递归深度的限制.
        """
        # 先序收集所有目录, 反过来就是每个子目录都排在它的父目录之前.
        dir_nodes = []
        stack = [dir_node]
        while stack:
            node = stack.pop()
            dir_nodes.append(node)
            stack.extend(node.subdirs)

        count = 0
        for node in reversed(dir_nodes):
            count += len(node.files.clear()) + 1
            node.subdirs.clear()
            node.detach()
        return count

    # 提供给外部的方法
    @property
    def closed(self) -> bool:
        """是否已经调用过 `teardown`."""
        return self._root is None

    @property
    def root(self) -> DirNode:
        """根目录.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
        """
        self.__check_open()
        return self._root

    @property
    def current_dir(self) -> DirNode:
        """当前目录.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
        """
        self.__check_open()
        return self._current_dir

    def get_current_dir_path(self) -> str:
        """返回当前目录的绝对路径 (根目录返回 `/`)."""
        self.__check_open()
        return self._current_dir.display_path

    def create_file(self, name: str) -> Optional[FileNode]:
        """在当前目录中创建一个文件, 如果该文件已经存在, 则将它的时间戳加1.

        Notes:
            * 如果当前目录中已经有同名的目录, 不做任何修改 (这不是错误).

        Args:
            name: 文件的名称.

        Returns:
            被创建或被更新的文件结点.如果被同名的目录挡住了, 返回None.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
            InvalidNamingConvention: 如果名称是空的、是保留名称, 或者其中包含“/”.
            OutOfMemory: 如果创建结点时内存不足 (此时目录树不变).
        """
        # 条件检查.
        self.__check_open()
        self.__check_name(name)
        if name in self._current_dir.subdirs:
            logger.debug("'%s'中已经有名为'%s'的目录, 不创建文件", self._current_dir.display_path, name)
            return None

        file_node = self._current_dir.files.find(name)
        if file_node is not None:
            file_node.timestamp += 1
            logger.debug("文件'%s'的时间戳更新为%d", name, file_node.timestamp)
            return file_node
        try:
            file_node = FileNode(name)
            self._current_dir.files.insert(file_node)
        except MemoryError as exc:
            raise OutOfMemory(f"创建文件'{name}'时内存不足") from exc
        logger.debug("在'%s'中创建了文件'%s'", self._current_dir.display_path, name)
        return file_node

    def mkdir(self, name: str) -> DirNode:
        """在当前目录中创建一个子目录.

        Notes:
            * 如果同名的子目录已经存在, 不做任何修改, 返回它.
            * 这里不检查同名的文件, 同名的文件和目录是可以共存的.

        Args:
            name: 子目录的名称.

        Returns:
            被创建的 (或已经存在的) 子目录结点.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
            InvalidNamingConvention: 如果名称是空的、是保留名称, 或者其中包含“/”.
            OutOfMemory: 如果创建结点时内存不足 (此时目录树不变).
        """
        # 条件检查.
        self.__check_open()
        self.__check_name(name)
        dir_node = self._current_dir.subdirs.find(name)
        if dir_node is not None:
            return dir_node

        try:
            dir_node = DirNode(name, self._current_dir.path + PATH_SEPARATOR + name, self._current_dir)
            self._current_dir.subdirs.insert(dir_node)
        except MemoryError as exc:
            raise OutOfMemory(f"创建目录'{name}'时内存不足") from exc
        logger.debug("创建了目录'%s'", dir_node.path)
        return dir_node

    def chdir(self, name: str) -> None:
        """切换当前目录.

        `.` 不做任何修改, `..` 切换到父目录 (当前目录是根目录时不做任何修改), `/` 切换到根目录.

        Notes:
            * 即使抛出异常, 当前目录也是不变的.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
            InvalidNamingConvention: 如果名称是空的, 或者其中包含“/”但不是“/”本身.
            PathIsNotDir: 如果该名称只对应当前目录中的一个文件.
            PathNotExists: 如果当前目录中没有该名称的子目录.
        """
        self.__check_open()
        if not name:
            raise InvalidNamingConvention("目录的名称不能是空的")
        dir_node = self.__resolve_dir(name)
        if dir_node is not None:  # 根目录的 `..` 是None.
            self._current_dir = dir_node

    def get_dir_content(self, name: str = '') -> list:
        """查看指定目录的内容.

        空名称和 `.` 表示当前目录, `..` 表示父目录, `/` 表示根目录, 其他名称表示当前目录的子目录.

        Returns:
            文件名和目录名 (目录名带有后缀 `/`) 按原始名称的升序合并成的列表.
            当前目录是根目录时, `..` 返回空列表.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
            InvalidNamingConvention: 如果名称中包含“/”但不是“/”本身.
            PathIsNotDir: 如果该名称只对应当前目录中的一个文件.
            PathNotExists: 如果当前目录中没有该名称.
        """
        self.__check_open()
        dir_node = self.__resolve_dir(name)
        if dir_node is None:
            return []
        # 两个序列本身已经有序, 只需合并 (原始名称相同时文件在前).
        merged = heapq.merge(
            ((file_node.name, file_node.name) for file_node in dir_node.files),
            ((subdir.name, subdir.name + PATH_SEPARATOR) for subdir in dir_node.subdirs),
            key=lambda item: item[0]
        )
        return [shown_name for _, shown_name in merged]

    def get_file(self, name: str) -> FileNode:
        """查找当前目录中的一个文件.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
            InvalidNamingConvention: 如果名称是空的、是保留名称, 或者其中包含“/”.
            PathNotExists: 如果当前目录中没有该名称的文件.
        """
        self.__check_open()
        self.__check_name(name)
        file_node = self._current_dir.files.find(name)
        if file_node is None:
            raise PathNotExists(f"当前目录中没有名为'{name}'的文件")
        return file_node

    def delete(self, name: str) -> int:
        """删除当前目录中的一个子目录 (连同它的全部内容) 或文件.

        Notes:
            * 同名时优先删除子目录.

        Returns:
            被释放的结点的数量.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
            InvalidNamingConvention: 如果名称是空的、是保留名称, 或者其中包含“/”.
            PathNotExists: 如果当前目录中没有该名称.
        """
        # 条件检查.
        self.__check_open()
        self.__check_name(name)

        dir_node = self._current_dir.subdirs.find(name)
        if dir_node is not None:
            self._current_dir.subdirs.pop(name)
            count = DirTreeHandler.__remove_dir(dir_node)
            logger.debug("删除了目录'%s', 共释放%d个结点", dir_node.path, count)
            return count
        if name in self._current_dir.files:
            self._current_dir.files.pop(name)
            logger.debug("在'%s'中删除了文件'%s'", self._current_dir.display_path, name)
            return 1
        raise PathNotExists(f"当前目录中没有名为'{name}'的文件或目录")

    def teardown(self) -> int:
        """释放整棵目录树 (包括根目录).

        Warnings:
            * 调用之后请 **不要** 再使用这个实例.

        Returns:
            被释放的结点的数量.

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
        """
        self.__check_open()
        count = DirTreeHandler.__remove_dir(self._root)
        self._root = None
        self._current_dir = None
        logger.info("释放了整棵目录树, 共%d个结点", count)
        return count
