from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, NamedTuple, TypeVar, Union, get_args, get_origin

T = TypeVar("T")
_ANNOTATED_MARKER_MIN_ARGS = 2


class Inject(NamedTuple):
    """Override the dependency type of a parameter or property.

    Attach ``Inject`` metadata to ``typing.Annotated`` when the annotation alone
    cannot name the dependency, for example for ``DependencyToken`` values or
    forward references. ``target`` may be a class, a token, or a zero-argument
    callable returning one of them.

    Examples:
        .. code-block:: python

            API_URL = DependencyToken.create("api_url")


            @component
            class Client:
                def __init__(self, url: Annotated[str, Inject(API_URL)]) -> None:
                    self.url = url

    """

    target: Any

    def resolve_target(self) -> Any:
        """Return the target, calling it first when it is a forward-reference callable."""
        target = self.target
        if callable(target) and not isinstance(target, type):
            return target()
        return target


class LazyMarker:
    """Marker that defers resolution of a dependency until first use."""

    def __repr__(self) -> str:
        return "LazyMarker()"


if TYPE_CHECKING:
    Lazy = Union[T, T]  # noqa: UP007,PYI016
    """Mark a dependency for deferred resolution.

    At runtime ``Lazy[T]`` becomes ``Annotated[T, LazyMarker()]``.
    """

else:

    class Lazy:
        """Mark a dependency for deferred resolution.

        At runtime ``Lazy[T]`` resolves to ``Annotated[T, LazyMarker()]``. The
        injected value is a proxy that resolves ``T`` on first attribute access,
        which is the supported way to break constructor cycles.

        Examples:
            .. code-block:: python

                @component
                class Parent:
                    def __init__(self, child: Lazy[Child]) -> None:
                        self.child = child

        """

        def __class_getitem__(cls, item: T) -> Annotated[T, LazyMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                return _build_annotated((args[0], *args[1:], LazyMarker()))
            return _build_annotated((item, LazyMarker()))


class AnnotationParts(NamedTuple):
    """Declared type and injection metadata split out of one annotation."""

    declared_type: Any
    type_override: Inject | None
    lazy: bool


def split_annotation(annotation: Any) -> AnnotationParts:
    """Split ``Annotated[T, Inject(...), LazyMarker()]`` into its parts."""
    if get_origin(annotation) is not Annotated:
        return AnnotationParts(annotation, None, lazy=False)
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return AnnotationParts(annotation_args[0], None, lazy=False)
    metadata = annotation_args[1:]
    type_override = next((item for item in metadata if isinstance(item, Inject)), None)
    lazy = any(isinstance(item, LazyMarker) for item in metadata)
    return AnnotationParts(annotation_args[0], type_override, lazy=lazy)


def _build_annotated(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]


__all__ = ["AnnotationParts", "Inject", "Lazy", "LazyMarker", "split_annotation"]
