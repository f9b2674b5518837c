"""TimelineView — interactive lane timeline for Jupyter notebooks and HTML export."""

import html
import json
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from timeline_dashboard.core.dates import days_between
from timeline_dashboard.core.drag import DragController, DragSession
from timeline_dashboard.core.edit import InlineEditor
from timeline_dashboard.core.errors import TimelineLoadError
from timeline_dashboard.core.item import ItemId, TimelineDocument, TimelineItem, find_item
from timeline_dashboard.layouts.axis import month_labels
from timeline_dashboard.layouts.coordinates import (
    BASE_DAY_WIDTH,
    MAX_ZOOM,
    MIN_ITEM_WIDTH,
    MIN_ZOOM,
    ZOOM_STEP,
    ItemGeometry,
    VisibleRange,
    clamp_zoom,
    compute_visible_range,
    item_geometry,
    step_zoom,
    timeline_width,
)
from timeline_dashboard.layouts.lanes import assign_lanes
from timeline_dashboard.sources.json_server import DEFAULT_BASE_URL, DEFAULT_RESOURCE, JsonServerClient
from timeline_dashboard.styles.colors import (
    BORDER_COLOR,
    BUTTON_COLOR,
    DEFAULT_ITEM_COLOR,
    ERROR_COLOR,
    HEADER_BACKGROUND,
    HEADER_HEIGHT,
    ITEM_HEIGHT,
    ITEM_TEXT_COLOR,
    LANE_BORDER_COLOR,
    LANE_HEIGHT,
    MONTH_LABEL_COLOR,
)

logger = logging.getLogger(__name__)


def _px(value: float) -> str:
    """Format a pixel value for CSS (no exponent, at most two decimals)."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


class TimelineView:
    """Stateful host for a lane timeline.

    TimelineView owns the canonical item list and provides:
    - Lane packing and date-axis geometry, re-derived from the current items
      on every access
    - Zoom in/out in x1.2 steps, clamped to [0.5, 5.0]
    - Pointer drag (move, resize start, resize end) in whole-day steps
    - Inline rename
    - HTML rendering for Jupyter (``_repr_html_``) or export

    Parameters
    ----------
    items : Sequence[TimelineItem], optional
        Initial items. Plain dicts are converted with ``TimelineItem.from_dict``.
    zoom : float
        Initial zoom factor (clamped).
    title : str
        Heading shown above the timeline.
    today : date, optional
        Anchor of the default window for an empty timeline. Defaults to the
        current day at render time.
    error : str, optional
        Load error to display instead of the timeline.

    Examples
    --------
    >>> view = TimelineView.from_json("timeline.json")
    >>> view.pointer_down(1, x=100)
    >>> view.pointer_move(x=172)  # 3 days at zoom 1
    >>> view.pointer_up()
    >>> view.display()
    """

    def __init__(
        self,
        items: Optional[Sequence[Union[TimelineItem, dict]]] = None,
        zoom: float = 1.0,
        title: str = "Project Timeline",
        today: Optional[date] = None,
        error: Optional[str] = None,
    ) -> None:
        loaded = [i if isinstance(i, TimelineItem) else TimelineItem.from_dict(i) for i in items or []]
        self._original_items = list(loaded)  # Immutable reference
        self._items = list(loaded)
        self.zoom = clamp_zoom(zoom)
        self.title = title
        self.today = today
        self.error = error
        self._drag = DragController()
        self._editor = InlineEditor()
        self._uid = uuid.uuid4().hex[:12]

    # ------------------------------------------------------------ Items
    @property
    def items(self) -> List[TimelineItem]:
        """The current item list (replaced wholesale on every edit)."""
        return self._items

    def set_items(self, items: Sequence[TimelineItem]) -> None:
        """Replace the item list, e.g. after a reload. Ends any drag or edit."""
        self._items = list(items)
        self._drag.pointer_up()
        self._editor.cancel_edit()

    def get_items(self) -> List[TimelineItem]:
        """Return a copy of the current item list."""
        return list(self._items)

    def _require_item(self, item_id: ItemId) -> TimelineItem:
        item = find_item(self._items, item_id)
        if item is None:
            raise KeyError(f"Item '{item_id}' not found")
        return item

    def changed_items(self) -> List[TimelineItem]:
        """Items that differ from the ones the view was created with."""
        original: Dict[ItemId, TimelineItem] = {i.id: i for i in self._original_items}
        return [item for item in self._items if original.get(item.id) != item]

    def has_changes(self) -> bool:
        return bool(self.changed_items())

    def reset(self) -> None:
        """Discard all edits and return to the original items."""
        self.set_items(self._original_items)

    # ---------------------------------------------------------- Derived
    @property
    def visible_range(self) -> VisibleRange:
        return compute_visible_range(self._items, today=self.today)

    @property
    def total_days(self) -> int:
        return self.visible_range.total_days

    @property
    def lanes(self) -> List[List[TimelineItem]]:
        """Lane partition of the current items ([] if any date is malformed)."""
        try:
            return assign_lanes(self._items)
        except (ValueError, TypeError) as e:
            logger.error("Error assigning lanes: %s", e)
            return []

    def geometry(self, item: TimelineItem) -> ItemGeometry:
        return item_geometry(item, self.visible_range.min_date, self.zoom)

    def geometries(self) -> Dict[ItemId, ItemGeometry]:
        """Geometry of every item, keyed by id."""
        min_date = self.visible_range.min_date
        return {item.id: item_geometry(item, min_date, self.zoom) for item in self._items}

    # ------------------------------------------------------------- Zoom
    def zoom_in(self) -> float:
        self.zoom = step_zoom(self.zoom, zoom_in=True)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = step_zoom(self.zoom, zoom_in=False)
        return self.zoom

    # ------------------------------------------------------------- Drag
    @property
    def drag_session(self) -> Optional[DragSession]:
        return self._drag.session

    def pointer_down(self, item_id: ItemId, x: float, handle: Optional[str] = None) -> DragSession:
        """Begin dragging an item's body (``handle=None``) or an edge handle.

        Raises
        ------
        KeyError
            If no item has ``item_id``.
        """
        self._require_item(item_id)
        return self._drag.pointer_down(item_id, x, handle)

    def pointer_move(self, x: float) -> bool:
        """Feed one pointer sample. Returns True if an item changed."""
        updated = self._drag.pointer_move(self._items, x, self.zoom)
        changed = updated is not self._items
        self._items = updated
        return changed

    def pointer_up(self) -> None:
        self._drag.pointer_up()

    # ----------------------------------------------------------- Rename
    @property
    def editing_id(self) -> Optional[ItemId]:
        return self._editor.editing_id

    def start_edit(self, item_id: ItemId) -> None:
        """Start renaming an item.

        Raises
        ------
        KeyError
            If no item has ``item_id``.
        """
        self._editor.start_edit(self._require_item(item_id))

    def update_edit_text(self, text: str) -> None:
        self._editor.update_text(text)

    def save_edit(self) -> None:
        self._items = self._editor.save_edit(self._items)

    def cancel_edit(self) -> None:
        self._editor.cancel_edit()

    # -------------------------------------------------------------- I/O
    def to_json(self, path: Union[str, Path]) -> None:
        """Save the current items to a JSON file."""
        TimelineDocument(items=self._items).to_json(path)

    @classmethod
    def from_json(cls, path: Union[str, Path], **kwargs) -> "TimelineView":
        """Create a view from a JSON file of items."""
        return cls(items=TimelineDocument.from_json(path).items, **kwargs)

    @classmethod
    def from_json_server(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        resource: str = DEFAULT_RESOURCE,
        client: Optional[JsonServerClient] = None,
        **kwargs,
    ) -> "TimelineView":
        """Create a view from a json-server resource.

        A retrieval failure does not raise; the view is created empty with
        ``error`` set, and renders an error message instead of the timeline.
        """
        own_client = client is None
        if client is None:
            client = JsonServerClient(base_url=base_url, resource=resource)
        try:
            return cls(items=client.fetch_items(), **kwargs)
        except TimelineLoadError as e:
            logger.error("Error fetching timeline data: %s", e)
            kwargs.pop("error", None)
            return cls(items=[], error=str(e), **kwargs)
        finally:
            if own_client:
                client.close()

    def push_changes(self, client: JsonServerClient) -> List[TimelineItem]:
        """Send every changed item to the server; they become the new baseline."""
        saved = [client.update_item(item) for item in self.changed_items()]
        self._original_items = list(self._items)
        return saved

    # ----------------------------------------------------------- Display
    def _repr_html_(self) -> str:
        """Jupyter auto-display."""
        return self.to_html()

    def display(self) -> None:
        """Display in IPython/Jupyter."""
        from IPython.display import HTML
        from IPython.display import display as ipy_display

        ipy_display(HTML(self.to_html()))

    def save_html(self, path: Union[str, Path]) -> None:
        """Write a standalone HTML page."""
        page = (
            '<!DOCTYPE html>\n<html><head><meta charset="utf-8"></head><body>\n'
            f"{self.to_html()}\n</body></html>\n"
        )
        with open(path, "w", encoding="utf-8") as f:
            f.write(page)

    def to_html(self) -> str:
        """Generate the full HTML string."""
        uid = self._uid
        parts = [
            f'<div id="tl-{uid}" class="tl-container">',
            f"<style>{self._css(uid)}</style>",
            self._header_html(uid),
        ]

        if self.error:
            parts.append(self._error_html())
        elif not self._items:
            parts.append(
                '<div class="tl-empty">'
                "<p>No timeline items found. Please add some items to your JSON server.</p>"
                "</div>"
            )
        else:
            parts.append(self._timeline_html(uid))

        parts.append(
            '<div class="tl-hint"><p>Double-click an item to edit its name. '
            "Drag edges to resize or the center to move.</p></div>"
        )
        parts.append(self._item_data_script(uid))
        parts.append(f"<script>{self._js(uid)}</script>")
        parts.append("</div>")
        return "\n".join(parts)

    # -------------------------------------------------------------- CSS
    def _css(self, uid: str) -> str:
        s = f"#tl-{uid}"
        return f"""
{s} * {{ box-sizing: border-box; }}
{s} {{
  display: flex; flex-direction: column; padding: 16px; width: 100%;
  font-family: -apple-system, 'Segoe UI', Roboto, sans-serif;
}}
{s} .tl-header {{
  display: flex; justify-content: space-between;
  align-items: center; margin-bottom: 16px;
}}
{s} .tl-title {{ font-size: 20px; font-weight: 700; }}
{s} .tl-controls {{ display: flex; gap: 8px; }}
{s} .tl-btn {{
  padding: 4px 12px; background: {BUTTON_COLOR}; color: white;
  border: none; border-radius: 4px; cursor: pointer;
}}
{s} .tl-scroll {{
  position: relative; overflow-x: auto;
  border: 1px solid {BORDER_COLOR}; border-radius: 4px;
}}
{s} .tl-axis {{
  position: sticky; top: 0; height: {HEADER_HEIGHT}px; z-index: 10;
  background: {HEADER_BACKGROUND}; border-bottom: 1px solid {BORDER_COLOR};
}}
{s} .tl-axis-inner, {s} .tl-lanes {{ position: relative; height: 100%; }}
{s} .tl-month {{
  position: absolute; top: 0; height: 100%;
  border-left: 1px solid #D1D5DB;
}}
{s} .tl-month span {{ padding-left: 4px; font-size: 12px; color: {MONTH_LABEL_COLOR}; }}
{s} .tl-lane {{
  position: relative; height: {LANE_HEIGHT}px;
  border-bottom: 1px solid {LANE_BORDER_COLOR};
}}
{s} .tl-item {{
  position: absolute; top: 4px; height: {ITEM_HEIGHT}px;
  display: flex; align-items: center; padding: 0 8px;
  border-radius: 4px; cursor: grab; user-select: none;
  box-shadow: 0 1px 2px rgba(0,0,0,0.1);
}}
{s} .tl-item-name {{
  width: 100%; overflow: hidden; text-overflow: ellipsis;
  white-space: nowrap; color: {ITEM_TEXT_COLOR};
}}
{s} .tl-item-input {{
  width: 100%; background: transparent; color: {ITEM_TEXT_COLOR};
  border: none; outline: none; font: inherit;
}}
{s} .tl-handle {{
  position: absolute; top: 0; width: 4px; height: 100%;
  background: white; opacity: 0;
}}
{s} .tl-handle:hover {{ opacity: 0.5; }}
{s} .tl-handle-start {{ left: 0; cursor: w-resize; }}
{s} .tl-handle-end {{ right: 0; cursor: e-resize; }}
{s} .tl-empty, {s} .tl-error {{
  display: flex; flex-direction: column; justify-content: center;
  align-items: center; height: 256px;
}}
{s} .tl-error {{ color: {ERROR_COLOR}; }}
{s} .tl-error-hint {{ font-size: 13px; margin-top: 8px; }}
{s} .tl-hint {{ margin-top: 8px; font-size: 12px; color: {MONTH_LABEL_COLOR}; }}
"""

    # ----------------------------------------------------------- Header
    def _header_html(self, uid: str) -> str:
        return (
            f'<div class="tl-header">'
            f'<span class="tl-title">{html.escape(self.title)}</span>'
            f'<div class="tl-controls">'
            f'<button class="tl-btn" data-zoom="out">Zoom Out</button>'
            f'<button class="tl-btn" data-zoom="in">Zoom In</button>'
            f"</div>"
            f"</div>"
        )

    def _error_html(self) -> str:
        return (
            f'<div class="tl-error">'
            f"<p>Error loading timeline data: {html.escape(str(self.error))}</p>"
            f'<p class="tl-error-hint">Make sure json-server is running at {DEFAULT_BASE_URL}</p>'
            f"</div>"
        )

    # ---------------------------------------------------------- Timeline
    def _timeline_html(self, uid: str) -> str:
        vr = self.visible_range
        width = timeline_width(vr, self.zoom)

        parts = [f'<div class="tl-scroll" id="tl-scroll-{uid}">']

        parts.append('<div class="tl-axis">')
        parts.append(f'<div class="tl-axis-inner" style="width:{_px(width)}px;">')
        for label in month_labels(vr, self.zoom):
            parts.append(
                f'<div class="tl-month" data-day="{days_between(vr.min_date, label.date)}" '
                f'style="left:{_px(label.left)}px;">'
                f"<span>{html.escape(label.label)}</span>"
                f"</div>"
            )
        parts.append("</div>")
        parts.append("</div>")

        parts.append(f'<div class="tl-lanes" style="width:{_px(width)}px;">')
        for lane_idx, lane in enumerate(self.lanes):
            parts.append(f'<div class="tl-lane" data-lane="{lane_idx}">')
            for item in lane:
                parts.append(self._item_div(item, vr))
            parts.append("</div>")
        parts.append("</div>")

        parts.append("</div>")
        return "\n".join(parts)

    def _item_div(self, item: TimelineItem, vr: VisibleRange) -> str:
        """Render a single item bar with its two resize handles."""
        geo = item_geometry(item, vr.min_date, self.zoom)
        color = html.escape(item.color or DEFAULT_ITEM_COLOR)
        item_id = html.escape(str(item.id))
        return (
            f'<div class="tl-item" data-item-id="{item_id}" '
            f'style="left:{_px(geo.left)}px;width:{_px(geo.width)}px;background-color:{color};">'
            f'<div class="tl-handle tl-handle-start" data-handle="start"></div>'
            f'<div class="tl-item-name">{html.escape(item.name)}</div>'
            f'<div class="tl-handle tl-handle-end" data-handle="end"></div>'
            f"</div>"
        )

    # -------------------------------------------------------- Data JSON
    def _item_data_script(self, uid: str) -> str:
        """Embed items and layout constants as a JS object for the drag preview."""
        data = {
            "items": {str(item.id): item.to_dict() for item in self._items},
            "minDate": self.visible_range.min_date.isoformat(),
            "zoom": self.zoom,
            "baseDayWidth": BASE_DAY_WIDTH,
            "minItemWidth": MIN_ITEM_WIDTH,
            "minZoom": MIN_ZOOM,
            "maxZoom": MAX_ZOOM,
            "zoomStep": ZOOM_STEP,
        }
        payload = json.dumps(data, ensure_ascii=False, default=str).replace("</", "<\\/")
        return f"<script>var tlData_{uid} = {payload};</script>"

    # -------------------------------------------------------- JavaScript
    def _js(self, uid: str) -> str:
        return f"""
(function() {{
  var container = document.getElementById('tl-{uid}');
  if (!container) return;
  var data = typeof tlData_{uid} !== 'undefined' ? tlData_{uid} : {{items: {{}}}};
  var DAY_MS = 86400000;

  function parseDay(s) {{
    var p = String(s).slice(0, 10).split('-');
    return Date.UTC(+p[0], +p[1] - 1, +p[2]);
  }}
  function formatDay(ms) {{ return new Date(ms).toISOString().slice(0, 10); }}
  function daysBetween(a, b) {{ return Math.round((parseDay(b) - parseDay(a)) / DAY_MS); }}
  function addDays(s, n) {{ return formatDay(parseDay(s) + n * DAY_MS); }}
  function dayWidth() {{ return data.baseDayWidth * data.zoom; }}
  function toDays(dx) {{
    return Math.round(dx / dayWidth());
  }}

  function place(el) {{
    var item = data.items[el.getAttribute('data-item-id')];
    if (!item) return;
    var left = daysBetween(data.minDate, item.start) * dayWidth();
    var right = daysBetween(data.minDate, item.end) * dayWidth();
    if (isNaN(left) || isNaN(right)) {{ left = 0; right = data.minItemWidth; }}
    el.style.left = left + 'px';
    el.style.width = Math.max(right - left, data.minItemWidth) + 'px';
  }}

  function relayout() {{
    container.querySelectorAll('.tl-item').forEach(place);
    container.querySelectorAll('.tl-month').forEach(function(el) {{
      el.style.left = (+el.getAttribute('data-day') * dayWidth()) + 'px';
    }});
    var scale = dayWidth() / (data.baseDayWidth * data.renderedZoom);
    container.querySelectorAll('.tl-axis-inner, .tl-lanes').forEach(function(el) {{
      if (!el.hasAttribute('data-width')) el.setAttribute('data-width', parseFloat(el.style.width));
      el.style.width = (+el.getAttribute('data-width') * scale) + 'px';
    }});
  }}
  data.renderedZoom = data.zoom;

  // Zoom buttons
  container.querySelectorAll('[data-zoom]').forEach(function(btn) {{
    btn.addEventListener('click', function() {{
      var z = btn.getAttribute('data-zoom') === 'in' ? data.zoom * data.zoomStep : data.zoom / data.zoomStep;
      data.zoom = Math.max(data.minZoom, Math.min(data.maxZoom, z));
      relayout();
    }});
  }});

  // Drag: handles take precedence over the body
  var drag = null;
  container.querySelectorAll('.tl-item').forEach(function(el) {{
    el.addEventListener('mousedown', function(e) {{
      if (e.target.tagName === 'INPUT') return;
      var handle = e.target.getAttribute('data-handle');
      drag = {{el: el, id: el.getAttribute('data-item-id'), mode: handle || 'move', lastX: e.clientX}};
      e.stopPropagation();
      e.preventDefault();
    }});
    el.addEventListener('dblclick', function(e) {{
      e.stopPropagation();
      startEdit(el);
    }});
  }});

  document.addEventListener('mousemove', function(e) {{
    if (!drag) return;
    var delta = toDays(e.clientX - drag.lastX);
    if (delta === 0) return;
    drag.lastX = e.clientX;
    var item = data.items[drag.id];
    if (drag.mode === 'move') {{
      item.start = addDays(item.start, delta);
      item.end = addDays(item.end, delta);
    }} else if (drag.mode === 'start') {{
      var s = addDays(item.start, delta);
      if (parseDay(s) < parseDay(item.end)) item.start = s;
    }} else if (drag.mode === 'end') {{
      var en = addDays(item.end, delta);
      if (parseDay(en) > parseDay(item.start)) item.end = en;
    }}
    place(drag.el);
  }});
  document.addEventListener('mouseup', function() {{ drag = null; }});

  // Inline rename
  function startEdit(el) {{
    var item = data.items[el.getAttribute('data-item-id')];
    var label = el.querySelector('.tl-item-name');
    if (!item || !label || label.querySelector('input')) return;
    var input = document.createElement('input');
    input.className = 'tl-item-input';
    input.value = item.name;
    label.textContent = '';
    label.appendChild(input);
    input.focus();
    function save() {{
      item.name = input.value;
      label.textContent = item.name;
    }}
    input.addEventListener('blur', save);
    input.addEventListener('keydown', function(e) {{ if (e.key === 'Enter') input.blur(); }});
  }}
}})();
"""
