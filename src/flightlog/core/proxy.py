"""Scene lookup and log proxy resolution.

Loggables cannot share module state with each other (each one may live in its
own scene, and a scene can be torn down and rebuilt), so the shared LogStore
is found by name: it sits on a scene object with a well-known name, and each
loggable caches the store it found in its own `_log_proxy` slot.

Usage:
    from flightlog.core.proxy import ProxyResolver, install_log_store

    store = install_log_store()
    resolved, found = ProxyResolver().resolve(caller)
"""

from __future__ import annotations

from typing import Any, TypeVar

from flightlog.core.config import DEFAULT_OBJECT_NAME, LoggerSettings
from flightlog.core.console import HostConsole
from flightlog.core.errors import SinkUnavailableError
from flightlog.core.store import LogStore, TextSurface

T = TypeVar("T")


class SceneObject:
    """A named object in a scene carrying components."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._components: list[Any] = []

    def add_component(self, component: T) -> T:
        self._components.append(component)
        return component

    def get_component(self, component_type: type[T]) -> T | None:
        for component in self._components:
            if isinstance(component, component_type):
                return component
        return None

    def __repr__(self) -> str:
        return f"SceneObject({self.name!r})"


class Scene:
    """Flat namespace of scene objects, looked up by name.

    `log_object_name` is the name the scene's LogStore object goes by; it is
    set by install_log_store().
    """

    def __init__(self) -> None:
        self._objects: list[SceneObject] = []
        self.log_object_name = DEFAULT_OBJECT_NAME

    def add(self, obj: SceneObject) -> SceneObject:
        self._objects.append(obj)
        return obj

    def remove(self, obj: SceneObject) -> None:
        try:
            self._objects.remove(obj)
        except ValueError:
            return

    def find(self, name: str) -> SceneObject | None:
        """Find the first object with the given name.

        Names are read at lookup time, so renamed objects are found under
        their new name.
        """
        for obj in self._objects:
            if obj.name == name:
                return obj
        return None

    def clear(self) -> None:
        self._objects.clear()


_SCENE: Scene | None = None


def get_scene() -> Scene:
    """Get the process-wide default scene."""
    global _SCENE
    if _SCENE is None:
        _SCENE = Scene()
    return _SCENE


class ProxyResolver:
    """Locates the shared LogStore for a caller, caching it on the caller.

    The cache is never invalidated: a caller keeps using the store it found
    even after that store's scene object is removed.
    """

    def __init__(self, scene: Scene | None = None, object_name: str | None = None) -> None:
        """Initialize resolver.

        Args:
            scene: Scene to search (defaults to the process-wide scene)
            object_name: Name of the log object to find (defaults to the name
                the scene's LogStore was installed under)
        """
        self._scene = scene
        self._object_name = object_name

    @property
    def scene(self) -> Scene:
        return self._scene if self._scene is not None else get_scene()

    @property
    def object_name(self) -> str:
        if self._object_name is not None:
            return self._object_name
        return self.scene.log_object_name

    def resolve(self, caller: Any | None = None) -> tuple[LogStore | None, bool]:
        """Resolve the log proxy for a caller.

        Args:
            caller: Object with a `_log_proxy` slot, or None for calls with no
                traceable source (those look the store up on every call)

        Returns:
            (store, found) tuple
        """
        if caller is not None:
            cached = getattr(caller, "_log_proxy", None)
            if cached is not None:
                return cached, True

        store = self._lookup()
        if store is None:
            return None, False

        if caller is not None:
            caller._log_proxy = store
        return store, True

    def require(self, caller: Any | None = None) -> LogStore:
        """Like resolve(), for callers that cannot run without a store.

        Raises:
            SinkUnavailableError: If no LogStore is installed
        """
        store, found = self.resolve(caller)
        if not found or store is None:
            raise SinkUnavailableError(self.object_name)
        return store

    def _lookup(self) -> LogStore | None:
        obj = self.scene.find(self.object_name)
        if obj is None:
            return None
        return obj.get_component(LogStore)


def install_log_store(
    scene: Scene | None = None,
    settings: LoggerSettings | None = None,
    console: HostConsole | None = None,
    surface: TextSurface | None = None,
) -> LogStore:
    """Create the log object in a scene and start its store.

    Args:
        scene: Scene to install into (defaults to the process-wide scene)
        settings: Store settings (defaults to LoggerSettings())
        console: Host console (defaults to the process-wide console)
        surface: Optional text surface to mirror the log to

    Returns:
        The started LogStore
    """
    scene = scene if scene is not None else get_scene()
    store = LogStore(settings=settings, console=console, surface=surface)

    obj = scene.add(SceneObject("Logger"))
    obj.add_component(store)
    store.scene_object = obj
    store.start()
    scene.log_object_name = store.settings.object_name
    return store
