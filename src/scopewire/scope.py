from __future__ import annotations


class Scope:
    """Unique tag identifying a layer in a container hierarchy.

    Two tags are equal only if they are the same object, so
    ``Scope("request") != Scope("request")``. Define tags once at module level
    and share them.

    Examples:
        .. code-block:: python

            HTTP_REQUEST = Scope("HTTP_REQUEST")

            root = Container()
            request = Container(root, scope=HTTP_REQUEST)

    """

    __slots__ = ("name",)

    def __init__(self, name: str = "") -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Scope({self.name!r})"
