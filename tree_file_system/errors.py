"""该模块包含tree_file_system需要的各种异常类；

    功能简述：
        · 所有异常都继承自 `FileSystemError`；
        · 对外接口把 `InvalidOperation` 及其子类统一折叠成 `False`，其余异常照常抛出；
"""

__all__ = (
    "FileSystemError",
    "InvalidOperation",
    "InvalidNamingConvention",
    "PathExists",
    "PathNotExists",
    "PathIsNotDir",
    "FileSystemClosed",
    "OutOfMemory",
)

# 导入模块
## 标准库模块
## 第三方库模块
## 自定义模块


class FileSystemError(Exception):
    """该文件系统中的异常的基类；"""

    __slots__ = ('message',)

    def __init__(self, message: str):
        super().__init__()

        self.message: str = message.capitalize()

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.message}')"


class InvalidOperation(FileSystemError):
    """非法操作的基类；

    Notes:
        * 对外接口只报告操作失败（返回 `False`），不区分具体原因；
    """

    __slots__ = ()


class InvalidNamingConvention(InvalidOperation):
    """当名称是空字符、其中有‘/’或者是保留名称（‘.’、‘..’、‘/’）时抛出；"""

    __slots__ = ()


class PathExists(InvalidOperation):
    """当向有序条目中插入一个已经存在的名称时抛出；"""

    __slots__ = ()


class PathNotExists(InvalidOperation):
    """当名称对应的文件或目录不存在时抛出；

    Notes:
        * 该类也是路径不存在的基类；
    """

    __slots__ = ()


class PathIsNotDir(PathNotExists):
    """当需要一个目录，但该名称只对应一个文件时抛出；"""

    __slots__ = ()


class FileSystemClosed(InvalidOperation):
    """当在 `teardown` 之后继续使用该文件系统时抛出；"""

    __slots__ = ()


class OutOfMemory(FileSystemError):
    """当创建结点时内存不足时抛出；

    Notes:
        * 抛出时目录树保持不变；
        * 这不是非法操作，对外接口不会把它折叠成 `False`；
    """

    __slots__ = ()
