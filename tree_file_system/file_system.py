"""该模块提供了一个完全位于内存中的树形文件系统, 供类似 shell 的命令解释器驱动.
    Warning:
        - 所有的操作都只接受 **一个** 路径分量, 不支持多级路径.
        - 除 `pwd` 外, 操作失败只通过返回 `False` 报告, 调用者无法区分失败的原因.
"""

# 标准库模块
from typing import Optional, Tuple
import logging

# 第三方库模块 (无)

# 自定义模块
from ._dir_tree_handler import DirTreeHandler, DirNode, FileNode, ROOT_DIR_NAME
from .errors import FileSystemClosed, InvalidOperation, PathIsNotDir

logger = logging.getLogger(__name__)


# 主类
class FileSystem:
    """该类提供一个完全位于内存中的树形文件系统.

    ## 使用示例

    用法:

    ```python
    with FileSystem() as fs:
        fs.mkdir('docs')
        fs.cd('docs')
        fs.touch('readme')
        print(fs.pwd())  # 输出'/docs'.
        ok, listing = fs.ls('')
        # 做一些其他的事儿...
    ```

    和用法:

    ```python
    fs = FileSystem()
    try:
        fs.mkdir('docs')
        # 做一些其他的事儿...
    finally:
        fs.teardown()
    ```

    是等价的.

    Warnings:
        - 在调用了 `teardown` 之后, 请 **不要** 再使用这个实例, 之后的操作都会失败 (`pwd` 以及 `root`、`current_dir` 属性会抛出 `FileSystemClosed`).

    Notes:
        - 放在最前面:
            - **不支持** 并行.
            - 多个实例之间没有任何共享的状态.
        - 保留名称 `.`、`..`、`/` 只在 `cd` 和 `ls` 中有意义, 在 `touch`、`mkdir`、`rm` 中都是非法的.
        - 重复 `touch` 一个文件只会把它的时间戳加1, 重复 `mkdir` 一个目录什么也不做, 它们都是成功的.
        - 内存不足时抛出 `OutOfMemory`, 此时目录树不变.
    """

    def __init__(self, root_name: str = ROOT_DIR_NAME):
        """创建只有根目录的文件系统, 当前目录就是根目录.

        Args:
            root_name: 根目录的名称.
        """
        self._dir_tree_handler = DirTreeHandler(root_name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """在退出前释放整棵目录树."""
        if not self.closed:
            self.teardown()

    @staticmethod
    def __report_failure(operation: str, name: str, exc: InvalidOperation) -> bool:
        """记录一次失败的操作, 并返回 `False`."""
        if isinstance(exc, FileSystemClosed):
            logger.warning("%s('%s') 失败: %s", operation, name, exc)
        else:
            logger.debug("%s('%s') 失败: %s", operation, name, exc)
        return False

    def __list(self, name: str) -> list:
        """列出一个目录的内容, 或者报告一个文件的名称和时间戳."""
        try:
            return self._dir_tree_handler.get_dir_content(name)
        except PathIsNotDir:
            file_node = self._dir_tree_handler.get_file(name)
            return [f"{file_node.name} {file_node.timestamp}"]

    # 提供给外部的方法
    @property
    def closed(self) -> bool:
        """是否已经调用过 `teardown`."""
        return self._dir_tree_handler.closed

    @property
    def root(self) -> DirNode:
        """根目录."""
        return self._dir_tree_handler.root

    @property
    def current_dir(self) -> DirNode:
        """当前目录."""
        return self._dir_tree_handler.current_dir

    def touch(self, name: str) -> bool:
        """在当前目录中创建一个文件, 如果它已经存在, 则将它的时间戳加1.

        如果当前目录中有同名的目录, 什么也不做, 但仍然返回 `True`.

        Returns:
            如果名称是空的、是保留名称, 或者其中包含“/”, 返回 `False`.否则, 返回 `True`.
        """
        try:
            self._dir_tree_handler.create_file(name)
        except InvalidOperation as exc:
            return self.__report_failure('touch', name, exc)
        return True

    def mkdir(self, name: str) -> bool:
        """在当前目录中创建一个子目录 (如果同名的子目录已经存在, 什么也不做).

        Returns:
            如果名称是空的、是保留名称, 或者其中包含“/”, 返回 `False`.否则, 返回 `True`.
        """
        try:
            self._dir_tree_handler.mkdir(name)
        except InvalidOperation as exc:
            return self.__report_failure('mkdir', name, exc)
        return True

    def cd(self, name: str) -> bool:
        """切换当前目录.

        Returns:
            如果名称是空的、其中包含“/”但不是“/”本身, 或者没有该名称的子目录, 返回 `False` (当前目录不变).
            否则, 返回 `True`.
        """
        try:
            self._dir_tree_handler.chdir(name)
        except InvalidOperation as exc:
            return self.__report_failure('cd', name, exc)
        return True

    def ls(self, name: str = '') -> Tuple[bool, list]:
        """列出一个目录的内容, 或者报告一个文件的名称和时间戳.

        Notes:
            * 空名称和 `.` 表示当前目录, `..` 表示父目录 (当前目录是根目录时列表为空), `/` 表示根目录.
            * 其他名称优先作为子目录查找, 找不到时作为文件查找.
            * 目录名带有后缀 `/`, 文件和目录按原始名称的升序混合排列.
            * 文件的报告是一个形如 `'名称 时间戳'` 的字符串.

        Returns:
            (是否成功, 列表).失败时列表为空.
        """
        try:
            listing = self.__list(name)
        except InvalidOperation as exc:
            return self.__report_failure('ls', name, exc), []
        return True, listing

    def pwd(self) -> str:
        """返回当前目录的绝对路径 (根目录返回 `/`).

        Raises:
            FileSystemClosed: 如果已经调用过 `teardown`.
        """
        return self._dir_tree_handler.get_current_dir_path()

    def rm(self, name: str) -> bool:
        """删除当前目录中的一个子目录 (连同它的全部内容) 或文件, 同名时优先删除子目录.

        Returns:
            如果名称是空的、是保留名称、其中包含“/”, 或者没有该名称, 返回 `False`.否则, 返回 `True`.
        """
        try:
            self._dir_tree_handler.delete(name)
        except InvalidOperation as exc:
            return self.__report_failure('rm', name, exc)
        return True

    def teardown(self) -> None:
        """释放整棵目录树, 之后请 **不要** 再使用这个实例."""
        try:
            self._dir_tree_handler.teardown()
        except FileSystemClosed as exc:
            self.__report_failure('teardown', '', exc)

    def get_file(self, name: str) -> Optional[FileNode]:
        """直接查找当前目录中的一个文件.

        Returns:
            如果存在, 返回该文件结点.否则, 返回None.
        """
        try:
            return self._dir_tree_handler.get_file(name)
        except InvalidOperation as exc:
            self.__report_failure('get_file', name, exc)
            return None


def init(root_name: str = ROOT_DIR_NAME) -> FileSystem:
    """创建一个新的、只有根目录的文件系统."""
    return FileSystem(root_name)
