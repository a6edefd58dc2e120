"""Chart lifecycle orchestration for a server-rendered, incrementally patched page."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from bs4 import BeautifulSoup, Tag

from ..adapters.base import ChartAdapter, make_adapter
from ..config import RendererConfig
from ..dom.scanner import DomScanner
from ..errors import ChartError, ConfigurationError, MalformedDescriptorError, MissingSurfaceError, UnknownBackendError
from ..models import Backend, ChartInstance
from ..registry.instance_registry import InstanceRegistry
from ..utils.ids import mint_chart_id

logger = logging.getLogger(__name__)


class RendererState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class ChartRenderer:
    """Creates, updates and destroys the charts of one page.

    The host calls :meth:`on_ready` once the document is parsed,
    :meth:`on_patched` after every partial update it applies, and
    :meth:`close` when the page goes away. Every handler runs to completion;
    no failure of a single chart propagates out of a handler.
    """

    def __init__(
        self,
        document: BeautifulSoup,
        *,
        config: RendererConfig | None = None,
        adapters: Mapping[Backend, ChartAdapter] | None = None,
    ) -> None:
        self.config = config or RendererConfig()
        self.scanner = DomScanner(document, self.config.protocol)
        self._adapters: dict[Backend, ChartAdapter] = dict(adapters or {})
        self._backend = self.config.backend
        self.registry = InstanceRegistry(self._adapter)
        self.state = RendererState.UNINITIALIZED
        # containers this renderer marked, keyed by id() of the element
        self._marked: dict[int, Tag] = {}

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def document(self) -> BeautifulSoup:
        return self.scanner.document

    def _adapter(self, backend: Backend) -> ChartAdapter:
        adapter = self._adapters.get(backend)
        if adapter is None:
            adapter = make_adapter(
                backend,
                value_prefix=self.config.value_prefix,
                include_plotlyjs=self.config.include_plotlyjs,
            )
            self._adapters[backend] = adapter
        return adapter

    def _closed(self, signal: str) -> bool:
        if self.state is RendererState.CLOSED:
            logger.debug("signal_after_close", extra={"signal": signal})
            return True
        return False

    # -- signals -----------------------------------------------------------

    def on_ready(self) -> int:
        """Render every container that is not marked yet; returns charts created."""
        if self._closed("ready"):
            return 0
        self._reconcile()
        created = self._render_containers(self.scanner.find_all())
        self.state = RendererState.READY
        logger.info("charts_initialized", extra={"charts": created, "backend": self._backend.value})
        return created

    def on_patched(self, document: Optional[BeautifulSoup] = None) -> int:
        """Handle a partial page update.

        Charts whose container left the document are destroyed, then only
        containers without the rendered marker are created. ``document``
        replaces the tracked tree when the host swapped it wholesale.
        """
        if self._closed("patched"):
            return 0
        if self.state is RendererState.UNINITIALIZED:
            if document is not None:
                self.scanner.document = document
            return self.on_ready()
        if document is not None:
            self.scanner.document = document
        self._reconcile()
        return self._render_containers(self.scanner.find_creatable())

    def set_backend(self, name: str | Backend) -> bool:
        """Switch every chart to another backend.

        An unknown name leaves the current backend and all charts untouched.
        """
        if self._closed("set_backend"):
            return False
        try:
            backend = Backend.parse(name)
        except UnknownBackendError as e:
            logger.warning("backend_unknown", extra={"backend": str(name), "current": self._backend.value, "error": str(e)})
            return False
        try:
            self._adapter(backend)
        except ImportError as e:
            logger.warning("backend_unavailable", extra={"backend": backend.value, "error": str(e)})
            return False

        self._backend = backend
        self.registry.clear()
        self._marked.clear()
        self.scanner.clear_all_markers()
        self.on_ready()
        return True

    def close(self) -> None:
        """Destroy every chart; later signals are ignored."""
        if self.state is RendererState.CLOSED:
            return
        self.registry.clear()
        self._marked.clear()
        self.state = RendererState.CLOSED
        logger.debug("renderer_closed")

    # -- explicit API ------------------------------------------------------

    def get(self, identifier: str) -> Optional[ChartInstance]:
        return self.registry.get(identifier)

    def update(self, identifier: str, payload: Mapping[str, Any]) -> bool:
        """Redraw a chart with a new payload; False keeps the previous one."""
        instance = self.registry.get(identifier)
        if instance is None:
            logger.debug("chart_update_missing", extra={"chart_id": identifier})
            return False
        if not isinstance(payload, Mapping):
            logger.warning(
                "chart_update_rejected",
                extra={"chart_id": identifier, "field": "payload", "error": f"expected a mapping, got {type(payload).__name__}"},
            )
            return False
        descriptor = instance.descriptor.with_payload(payload)
        try:
            self._adapter(instance.backend).update(instance.handle, descriptor)
        except ConfigurationError as e:
            logger.warning(
                "chart_update_rejected",
                extra={"chart_id": identifier, "field": e.field, "error": str(e)},
            )
            return False
        except ChartError as e:
            logger.warning("chart_update_failed", extra={"chart_id": identifier, "error": str(e)})
            return False
        except Exception:  # noqa: BLE001
            logger.exception("chart_backend_error", extra={"chart_id": identifier, "backend": instance.backend.value})
            return False
        instance.descriptor = descriptor
        return True

    def destroy(self, identifier: str) -> None:
        self.registry.remove(identifier)

    def identifiers(self) -> list[str]:
        return self.registry.identifiers()

    def __len__(self) -> int:
        return len(self.registry)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.registry

    # -- internals ---------------------------------------------------------

    def prune_detached(self, containers: list[Tag] | None = None) -> int:
        """Destroy charts whose container element is no longer in the document.

        Containers are compared by identity: a copy carrying the same
        ``data-chart-id`` is a different element and does not keep the old
        chart alive.
        """
        if containers is None:
            containers = list(self.scanner.find_all())
        attached = {id(c) for c in containers}
        detached = [i.identifier for i in self.registry if i.container is None or id(i.container) not in attached]
        for identifier in detached:
            self.registry.remove(identifier)
        if detached:
            logger.debug("charts_pruned", extra={"chart_ids": detached})
        return len(detached)

    def _reconcile(self) -> None:
        containers = list(self.scanner.find_all())
        self.prune_detached(containers)
        attached = {id(c) for c in containers}
        self._marked = {k: c for k, c in self._marked.items() if k in attached}
        # markers this renderer did not set (copied trees, server output) are released
        released = 0
        for container in containers:
            if self.scanner.is_rendered(container) and id(container) not in self._marked:
                self.scanner.clear_marker(container)
                released += 1
        if released:
            logger.debug("chart_markers_released", extra={"count": released})

    def _resolve_identifier(self, container: Tag, surface: Tag) -> str:
        surface_id = surface.get("id")
        if surface_id:
            return str(surface_id)
        return self.scanner.chart_id_of(container) or mint_chart_id()

    def _render_containers(self, containers: Iterable[Tag]) -> int:
        created = 0
        for container in containers:
            if self.scanner.is_rendered(container):
                continue
            if self.render_container(container) is not None:
                created += 1
        return created

    def render_container(self, container: Tag) -> Optional[ChartInstance]:
        """Create the chart for one unmarked container.

        Returns None when the container was skipped; the reason is logged.
        """
        if self.scanner.is_rendered(container):
            return None
        try:
            descriptor = self.scanner.extract_descriptor(container)
            surface = self.scanner.surface_of(container)
        except MalformedDescriptorError as e:
            logger.warning(
                "chart_descriptor_malformed",
                extra={"chart_id": self.scanner.chart_id_of(container), "attribute": e.attribute, "error": str(e)},
            )
            return None
        except MissingSurfaceError as e:
            logger.warning("chart_surface_missing", extra={"chart_id": self.scanner.chart_id_of(container), "error": str(e)})
            return None

        identifier = self._resolve_identifier(container, surface)
        # the previous instance must be gone before the new one draws
        self.registry.remove(identifier)

        try:
            handle = self._adapter(self._backend).create(surface, descriptor)
        except ConfigurationError as e:
            logger.warning(
                "chart_configuration_invalid",
                extra={"chart_id": identifier, "field": e.field, "error": str(e)},
            )
            return None
        except ChartError as e:
            logger.warning("chart_create_failed", extra={"chart_id": identifier, "error": str(e)})
            return None
        except Exception:  # noqa: BLE001
            logger.exception("chart_backend_error", extra={"chart_id": identifier, "backend": self._backend.value})
            return None

        instance = ChartInstance(
            identifier=identifier,
            descriptor=descriptor,
            backend=self._backend,
            handle=handle,
            container=container,
        )
        self.registry.put(identifier, instance)
        self.scanner.mark_rendered(container, identifier)
        self._marked[id(container)] = container
        logger.debug("chart_created", extra={"chart_id": identifier, "kind": descriptor.kind.value})
        return instance
