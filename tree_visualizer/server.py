#!/usr/bin/env python3
"""
Persistent bridge between a presentation shell and one tree document.

Communicates via stdin/stdout JSON-line protocol.
All debug/logging goes to a log file; stdout is reserved for protocol only.

Protocol:
    Shell -> Python (stdin):  {"id":"req_1","command":"add_child","data":{...}}\n
    Python -> Shell (stdout): {"id":"req_1","success":true,"result":{...}}\n

Commands:
    add_child, delete_subtree, toggle_expand, update_node, find, search,
    statistics, add_random_subtree, randomize_colors, expand_all,
    collapse_all, clear                    - Tree model
    layout, list_layouts                   - Layout engine
    hit_test                               - Hit tester
    scene                                  - Scene builder
    ping                                   - Health check
    shutdown                               - Graceful exit
"""

from typing import Dict, Any, Optional, Callable
import argparse
import json
import logging
import os
import sys
import time
from pathlib import Path

from .config import LayoutConfig, SceneConfig, load_config
from .core.document import TreeDocument
from .core.errors import TreeError
from .core.registry import LayoutRegistry
from .hit_test import hit_test
from .layouts import compute_layout, list_layouts, LayoutKind
from .scene import SceneBuilder

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = Path.cwd() / "server.log"

_UPDATABLE_FIELDS = ('label', 'description', 'color', 'size_factor')


class BridgeSession:
    """
    One session: a document plus the view settings the shell last used.

    Every structural command is followed by a full relayout so positions
    are always current when the shell asks for a scene or a hit test.
    """

    def __init__(self, document: Optional[TreeDocument] = None):
        self.document = document or TreeDocument()
        self.strategy: str = LayoutKind.HIERARCHICAL.value
        self.canvas_size = (800.0, 600.0)
        self.scale = 1.0
        self.layout_config = LayoutConfig()
        self.scene_builder = SceneBuilder(SceneConfig(), self.layout_config)

        self._handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            'ping': self._ping,
            'add_child': self._add_child,
            'delete_subtree': self._delete_subtree,
            'toggle_expand': self._toggle_expand,
            'update_node': self._update_node,
            'find': self._find,
            'search': self._search,
            'statistics': lambda data: self.document.statistics().to_dict(),
            'add_random_subtree': self._add_random_subtree,
            'randomize_colors': self._randomize_colors,
            'expand_all': self._expand_all,
            'collapse_all': self._collapse_all,
            'clear': self._clear,
            'layout': self._layout,
            'list_layouts': lambda data: {'layouts': list_layouts()},
            'hit_test': self._hit_test,
            'scene': self._scene,
        }

    @property
    def commands(self):
        return sorted(self._handlers) + ['shutdown']

    def handle(self, command: str, data: Dict[str, Any]) -> Any:
        """
        Run one command.

        Raises:
            KeyError: Unknown command or node
            ValueError: Invalid argument values
        """
        handler = self._handlers.get(command)
        if handler is None:
            raise KeyError(f"Unknown command: {command}")
        if not isinstance(data, dict):
            raise ValueError("request data must be a JSON object")
        return handler(data)

    def relayout(self) -> None:
        started = time.perf_counter()
        compute_layout(self.document.root, self.canvas_size, self.scale,
                       self.strategy, self.layout_config)
        logger.debug(f"[Server] {self.strategy} layout in {time.perf_counter() - started:.3f}s")

    # ---------- tree model ----------

    def _ping(self, data):
        return {"status": "alive", "pid": os.getpid()}

    def _add_child(self, data):
        node_id = self.document.add_child(
            data['parent_id'],
            label=data.get('label'),
            color=data.get('color'),
            size_factor=data.get('size_factor', 1.0),
            description=data.get('description'),
            metadata=data.get('metadata'),
        )
        self.relayout()
        return {'node_id': node_id}

    def _delete_subtree(self, data):
        removed = self.document.delete_subtree(data['node_id'])
        self.relayout()
        return {'removed': removed}

    def _toggle_expand(self, data):
        expanded = self.document.toggle_expand(data['node_id'])
        self.relayout()
        return {'expanded': expanded}

    def _update_node(self, data):
        patch = {k: data[k] for k in _UPDATABLE_FIELDS if k in data}
        node = self.document.update(data['node_id'], **patch)
        self.relayout()
        return node.to_dict()

    def _find(self, data):
        node = self.document.find(data['node_id'])
        return node.to_dict(include_children=data.get('include_children', False))

    def _search(self, data):
        matches = self.document.search(
            data.get('query', ''),
            limit=data.get('limit', 10),
            min_score=data.get('min_score', 60),
        )
        return {'matches': [{'node_id': n.id, 'label': n.label, 'score': s} for n, s in matches]}

    def _add_random_subtree(self, data):
        created = self.document.add_random_subtree(
            data.get('parent_id', self.document.root.id),
            max_depth=data.get('max_depth', 3),
            seed=data.get('seed'),
        )
        self.relayout()
        return {'created': created}

    def _randomize_colors(self, data):
        self.document.randomize_colors(seed=data.get('seed'))
        return {'status': 'ok'}

    def _expand_all(self, data):
        self.document.expand_all()
        self.relayout()
        return {'status': 'ok'}

    def _collapse_all(self, data):
        self.document.collapse_all()
        self.relayout()
        return {'status': 'ok'}

    def _clear(self, data):
        removed = self.document.clear()
        self.relayout()
        return {'removed': removed}

    # ---------- layout / hit test / scene ----------

    def _layout(self, data):
        strategy = data.get('strategy', self.strategy)
        if not isinstance(strategy, str) or not LayoutRegistry.has(strategy):
            raise KeyError(f"Unknown layout '{strategy}'. Available: {', '.join(list_layouts())}")
        self.strategy = strategy.lower()
        if 'canvas_size' in data:
            width, height = data['canvas_size']
            self.canvas_size = (float(width), float(height))
        self.scale = float(data.get('scale', self.scale))
        if 'config' in data:
            self.layout_config = load_config(data['config'])
            self.scene_builder.layout_config = self.layout_config

        self.relayout()
        return {
            'strategy': self.strategy,
            'positions': {
                node.id: node.position.to_tuple()
                for node in self.document.visible_nodes()
            },
        }

    def _hit_test(self, data):
        node = hit_test(tuple(data['point']), self.document.root,
                        self.scale, self.layout_config)
        return {'node_id': node.id if node else None}

    def _scene(self, data):
        scene = self.scene_builder.build(
            self.document.root,
            scale=self.scale,
            selected=data.get('selected', ()),
            active_id=data.get('active_id'),
            hovered_id=data.get('hovered_id'),
            show_labels=data.get('show_labels', True),
            show_3d=data.get('show_3d', True),
            presentation=data.get('presentation', False),
        )
        return scene.to_dict()


def send_response(request_id, success, result=None, error=None, error_type=None, stream=None):
    """Send a JSON-line response to stdout."""
    msg = {"id": request_id, "success": success}
    if result is not None:
        msg["result"] = result
    if error is not None:
        msg["error"] = error
    if error_type is not None:
        msg["error_type"] = error_type
    stream = stream or sys.stdout
    stream.write(json.dumps(msg, ensure_ascii=False) + "\n")
    stream.flush()


def serve(session: BridgeSession, lines, out=None) -> None:
    """Read JSON-line commands until EOF or shutdown."""
    send_response("__ready__", True, {"pid": os.getpid(), "commands": session.commands}, stream=out)

    for line in lines:
        line = line.strip()
        if not line:
            continue

        request_id = None
        try:
            msg = json.loads(line)
            if not isinstance(msg, dict):
                raise ValueError("request must be a JSON object")
            request_id = msg.get("id", "unknown")
            command = msg.get("command", "")
            data = msg.get("data")
            if data is None:
                data = {}

            logger.info(f"[Server] Received command: {command} (id: {request_id})")

            if command == "shutdown":
                logger.info("[Server] Shutdown requested")
                send_response(request_id, True, {"status": "shutting_down"}, stream=out)
                break

            result = session.handle(command, data)
            send_response(request_id, True, result, stream=out)

        except json.JSONDecodeError as e:
            logger.warning(f"[Server] Invalid JSON: {e} (line: {line[:200]})")
            send_response(request_id or "unknown", False, error=f"Invalid JSON: {e}",
                          error_type=type(e).__name__, stream=out)
        except (TreeError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"[Server] Command failed: {type(e).__name__}: {e}")
            message = str(e) if isinstance(e, TreeError) else str(e).strip("'\"")
            send_response(request_id or "unknown", False, error=message,
                          error_type=type(e).__name__, stream=out)

    logger.info("[Server] Server exiting")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Tree visualizer JSON-line bridge')
    parser.add_argument('--log-file', default=str(DEFAULT_LOG_FILE),
                        help='Where diagnostics are written (stdout carries the protocol)')
    parser.add_argument('--debug', action='store_true', help='Log at DEBUG level')
    args = parser.parse_args(argv)

    logging.basicConfig(
        filename=args.log_file,
        filemode='w',
        level=logging.DEBUG if args.debug else logging.INFO,
        format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
    )
    logger.info(f"[Server] PID: {os.getpid()}  Python: {sys.version.split()[0]}  CWD: {os.getcwd()}")

    serve(BridgeSession(), sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())
