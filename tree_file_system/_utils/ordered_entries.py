"""按名称的字典序升序维护一组条目, 支持按名称的查找、插入、移除."""

# 标准库模块
from typing import Iterator, Optional
import bisect

# 第三方库模块 (无)

# 自定义模块
from ..errors import PathExists, PathNotExists


def _name_of(entry) -> str:
    """条目的排序键."""
    return entry.name


class OrderedEntries:
    """按名称的字典序升序维护一组条目, 支持按名称的查找、插入、移除.

    ## 使用示例

    ```python
    entries = OrderedEntries()
    entries.insert(FileNode('b'))
    entries.insert(FileNode('a'))
    print(entries.names())  # 输出['a', 'b'].
    file_node = entries.find('a')
    entries.pop('b')
    ```

    Warnings:
        - 条目必须有一个字符串属性 `name`, 并且在条目位于本容器期间 **不要** 修改它, 否则有序性会被破坏.

    Notes:
        - 有序性是插入时维护的 (而不是读取时排序), 任何时刻遍历得到的都是升序.
        - 同一个名称最多只有一个条目.
        - 查找是二分的, 插入和移除需要移动后面的元素.
    """

    __slots__ = ('_entries',)

    # 内部
    def __init__(self):
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator:
        return iter(self._entries)

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.names()!r})"

    def __locate(self, name: str) -> int:
        """返回名称应当插入的位置 (如果该名称存在, 就是它所在的位置)."""
        return bisect.bisect_left(self._entries, name, key=_name_of)

    # 外部
    def names(self) -> list:
        """按升序返回所有条目的名称."""
        return [entry.name for entry in self._entries]

    def find(self, name: str) -> Optional[object]:
        """查找指定名称的条目.

        Returns:
            如果存在, 返回该条目.否则, 返回None.
        """
        index = self.__locate(name)
        if index < len(self._entries) and self._entries[index].name == name:
            return self._entries[index]
        return None

    def insert(self, entry) -> None:
        """将条目插入到保持升序的位置.

        Raises:
            PathExists: 如果已经有一个同名的条目.
        """
        index = self.__locate(entry.name)
        if index < len(self._entries) and self._entries[index].name == entry.name:
            raise PathExists(f"名称'{entry.name}'已经存在")
        self._entries.insert(index, entry)

    def pop(self, name: str):
        """移除并返回指定名称的条目.

        Raises:
            PathNotExists: 如果该名称不存在.
        """
        index = self.__locate(name)
        if index < len(self._entries) and self._entries[index].name == name:
            return self._entries.pop(index)
        raise PathNotExists(f"名称'{name}'不存在")

    def clear(self) -> list:
        """移除所有条目.

        Returns:
            按升序返回被移除的条目.
        """
        entries, self._entries = self._entries, []
        return entries
