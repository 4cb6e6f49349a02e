"""Scoped providers are cached on the container carrying their scope tag.

This module covers:

1. A scoped resolver registered on a leaf container, cached on its scoped
   parent.
2. ``ScopewireUndefinedScopeError`` when no container in the ancestry carries
   the tag.
3. ``ScopewireDuplicateScopeError`` when a tag is reused along one path.
"""

from __future__ import annotations

from datetime import datetime

from scopewire import Container, ResolverProvider, Scope
from scopewire.exceptions import (
    ScopewireDuplicateScopeError,
    ScopewireUndefinedKeyError,
    ScopewireUndefinedScopeError,
)

HTTP_REQUEST = Scope("HTTP_REQUEST")


def main() -> None:
    root = Container()
    request = Container(root, scope=HTTP_REQUEST)
    handler = Container(request)

    handler.register(datetime, ResolverProvider(datetime.now, scope=HTTP_REQUEST))

    started_at = handler.get(datetime)
    print(f"cached_on_request={request.get(datetime) is started_at}")  # => cached_on_request=True

    try:
        root.get(datetime)
    except ScopewireUndefinedKeyError as error:
        root_error = type(error).__name__
    print(f"root_error={root_error}")  # => root_error=ScopewireUndefinedKeyError

    detached = Container(root)
    detached.register(datetime, ResolverProvider(datetime.now, scope=HTTP_REQUEST))
    try:
        detached.get(datetime)
    except ScopewireUndefinedScopeError as error:
        scope_error = type(error).__name__
    print(f"detached_error={scope_error}")  # => detached_error=ScopewireUndefinedScopeError

    try:
        Container(handler, scope=HTTP_REQUEST)
    except ScopewireDuplicateScopeError as error:
        duplicate_error = type(error).__name__
    print(f"nested_same_scope={duplicate_error}")  # => nested_same_scope=ScopewireDuplicateScopeError

    sibling = Container(root, scope=HTTP_REQUEST)
    print(f"sibling_scope_allowed={sibling.scope is HTTP_REQUEST}")  # => sibling_scope_allowed=True


if __name__ == "__main__":
    main()
