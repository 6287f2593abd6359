"""Minimal document model for rewriting a static HTML page.

The page is parsed with the standard library ``html.parser`` into a small
tree of :class:`Element`, :class:`Text`, :class:`Comment` and
:class:`Doctype` nodes. All page queries and mutations done by the features
go through this module: attribute lookups, ``text_content``, the document
title, control creation, event listeners and document-ready dispatch.
Serialization writes the tree back out as HTML.
"""

from __future__ import annotations

import html
import inspect
import logging
from collections import defaultdict
from html.parser import HTMLParser
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Union

log = logging.getLogger(__name__)

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

READY_EVENT = "DOMContentLoaded"

Listener = Callable[["Event"], Union[None, Awaitable[None]]]


class Event:
    def __init__(self, type: str, key: str | None = None) -> None:
        self.type = type
        self.key = key
        self.default_prevented = False
        self.target: Optional[EventTarget] = None

    def prevent_default(self) -> None:
        self.default_prevented = True

    def __repr__(self) -> str:
        return f"Event(type={self.type!r}, key={self.key!r})"


class EventTarget:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def add_event_listener(self, type: str, listener: Listener) -> None:
        if listener not in self._listeners[type]:
            self._listeners[type].append(listener)

    def listener_count(self, type: str) -> int:
        return len(self._listeners.get(type, ()))

    async def dispatch_event(self, event: Event) -> bool:
        """Run listeners in registration order, awaiting coroutine listeners.

        Returns False when a listener called ``prevent_default``.
        """
        event.target = self
        for listener in list(self._listeners.get(event.type, ())):
            result = listener(event)
            if inspect.isawaitable(result):
                await result
        return not event.default_prevented


class Node:
    parent: Optional["Element"] = None

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None


class Text(Node):
    def __init__(self, data: str) -> None:
        self.data = data


class Comment(Node):
    def __init__(self, data: str) -> None:
        self.data = data


class Doctype(Node):
    def __init__(self, decl: str) -> None:
        self.decl = decl


class Element(Node, EventTarget):
    def __init__(self, tag: str, attrs: Optional[Dict[str, Optional[str]]] = None) -> None:
        EventTarget.__init__(self)
        self.tag = tag.lower()
        self.attrs: Dict[str, Optional[str]] = dict(attrs or {})
        self.children: List[Node] = []

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attrs!r}>"

    # Attributes

    def get_attribute(self, name: str) -> Optional[str]:
        value = self.attrs.get(name)
        if value is None and name in self.attrs:
            return ""
        return value

    def set_attribute(self, name: str, value: Any) -> None:
        if isinstance(value, bool):
            value = "true" if value else "false"
        self.attrs[name] = str(value)

    @property
    def id(self) -> Optional[str]:
        return self.attrs.get("id")

    @property
    def class_list(self) -> List[str]:
        return (self.attrs.get("class") or "").split()

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    def add_class(self, name: str) -> None:
        classes = self.class_list
        if name not in classes:
            classes.append(name)
            self.attrs["class"] = " ".join(classes)

    def remove_class(self, name: str) -> None:
        classes = [c for c in self.class_list if c != name]
        self.attrs["class"] = " ".join(classes)

    # Tree

    def append_child(self, node: Node) -> Node:
        node.detach()
        node.parent = self
        self.children.append(node)
        return node

    def insert_child(self, index: int, node: Node) -> Node:
        node.detach()
        node.parent = self
        self.children.insert(index, node)
        return node

    def iter(self) -> Iterator["Element"]:
        """Depth-first, document order, including this element."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def find(self, predicate: Callable[["Element"], bool]) -> Optional["Element"]:
        for el in self.iter():
            if predicate(el):
                return el
        return None

    def find_all_with_attribute(self, name: str) -> List["Element"]:
        return [el for el in self.iter() if name in el.attrs]

    def find_by_class(self, name: str) -> Optional["Element"]:
        return self.find(lambda el: el.has_class(name))

    @property
    def text_content(self) -> str:
        parts: List[str] = []
        for child in self.children:
            if isinstance(child, Text):
                parts.append(child.data)
            elif isinstance(child, Element):
                parts.append(child.text_content)
        return "".join(parts)

    @text_content.setter
    def text_content(self, value: str) -> None:
        for child in self.children:
            child.parent = None
        self.children = []
        if value:
            self.append_child(Text(value))


class _TreeBuilder(HTMLParser):
    def __init__(self, root: Element) -> None:
        super().__init__(convert_charrefs=True)
        self.stack: List[Element] = [root]

    def handle_starttag(self, tag: str, attrs: List[tuple]) -> None:
        el = Element(tag, dict(attrs))
        self.stack[-1].append_child(el)
        if el.tag not in VOID_ELEMENTS:
            self.stack.append(el)

    def handle_startendtag(self, tag: str, attrs: List[tuple]) -> None:
        self.stack[-1].append_child(Element(tag, dict(attrs)))

    def handle_endtag(self, tag: str) -> None:
        for i in range(len(self.stack) - 1, 0, -1):
            if self.stack[i].tag == tag:
                del self.stack[i:]
                return
        log.debug("Ignoring stray end tag </%s>", tag)

    def handle_data(self, data: str) -> None:
        self.stack[-1].append_child(Text(data))

    def handle_comment(self, data: str) -> None:
        self.stack[-1].append_child(Comment(data))

    def handle_decl(self, decl: str) -> None:
        self.stack[-1].append_child(Doctype(decl))


def _serialize(node: Node, out: List[str]) -> None:
    if isinstance(node, Text):
        if node.parent is not None and node.parent.tag in RAW_TEXT_ELEMENTS:
            out.append(node.data)
        else:
            out.append(html.escape(node.data, quote=False))
    elif isinstance(node, Comment):
        out.append(f"<!--{node.data}-->")
    elif isinstance(node, Doctype):
        out.append(f"<!{node.decl}>")
    elif isinstance(node, Element):
        out.append(f"<{node.tag}")
        for name, value in node.attrs.items():
            if value is None:
                out.append(f" {name}")
            else:
                out.append(f' {name}="{html.escape(value, quote=True)}"')
        out.append(">")
        if node.tag in VOID_ELEMENTS:
            return
        for child in node.children:
            _serialize(child, out)
        out.append(f"</{node.tag}>")


class Document(EventTarget):
    def __init__(self) -> None:
        super().__init__()
        self.root = Element("#document")
        self.ready = False

    @classmethod
    def parse(cls, markup: str) -> "Document":
        doc = cls()
        builder = _TreeBuilder(doc.root)
        builder.feed(markup)
        builder.close()
        return doc

    @classmethod
    def from_path(cls, path: Path) -> "Document":
        return cls.parse(Path(path).read_text(encoding="utf-8"))

    def serialize(self) -> str:
        out: List[str] = []
        for child in self.root.children:
            _serialize(child, out)
        return "".join(out)

    def write(self, path: Path) -> None:
        Path(path).write_text(self.serialize(), encoding="utf-8")

    # Queries

    def _first(self, tag: str) -> Optional[Element]:
        return self.root.find(lambda el: el.tag == tag)

    @property
    def document_element(self) -> Element:
        el = self._first("html")
        return el if el is not None else self.root

    @property
    def head(self) -> Element:
        head = self._first("head")
        if head is None:
            head = Element("head")
            self.document_element.insert_child(0, head)
        return head

    @property
    def body(self) -> Element:
        body = self._first("body")
        if body is None:
            body = Element("body")
            self.document_element.append_child(body)
        return body

    @property
    def title(self) -> str:
        el = self._first("title")
        return el.text_content.strip() if el is not None else ""

    @title.setter
    def title(self, value: str) -> None:
        el = self._first("title")
        if el is None:
            el = Element("title")
            self.head.append_child(el)
        el.text_content = value

    def create_element(self, tag: str, **attrs: str) -> Element:
        el = Element(tag)
        for name, value in attrs.items():
            el.set_attribute("class" if name == "class_" else name, value)
        return el

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return self.root.find(lambda el: el.attrs.get("id") == element_id)

    def find_all_with_attribute(self, name: str) -> List[Element]:
        return [el for el in self.root.find_all_with_attribute(name) if el is not self.root]

    # Lifecycle

    def on_ready(self, listener: Listener) -> None:
        self.add_event_listener(READY_EVENT, listener)

    async def fire_ready(self) -> None:
        """Dispatch the document-ready event once."""
        if self.ready:
            return
        self.ready = True
        await self.dispatch_event(Event(READY_EVENT))
