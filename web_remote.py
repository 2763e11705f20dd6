#!/usr/bin/env python3
"""
web_remote.py  –  browser remote for a running slideshow

Endpoints
---------
/               → control page: buttons, overlay text, live timeline table
/overlay        → JSON array of overlay text lines
/timeline       → JSON object: clock state plus every item with its current alpha
/diag           → JSON object: what the viewer is doing plus host load (psutil)
/action?cmd=…   → queue a command (start, toggle, fullscreen, quit)
/log            → contents of the runtime log (if present)

The server thread never touches the runtime directly; commands go through
the EventManager queue and are applied by the render loop.
"""

from __future__ import annotations
import http.server
import socketserver
import threading
import urllib.parse
import json
import logging
import time
import traceback
import psutil
from typing import TYPE_CHECKING, Any

import config
from events   import (ACT_QUIT, ACT_START, ACT_TOGGLE_FULLSCREEN,
                      ACT_TOGGLE_OVERLAY, EventManager)
from overlays import overlay_lines
from playback import SlideshowRuntime

if TYPE_CHECKING:                       # avoid pulling in the window at import
    from app import SlideshowApp

log = logging.getLogger(__name__)

# remote command → action type
_COMMANDS = {
    "start":      ACT_START,
    "toggle":     ACT_TOGGLE_OVERLAY,
    "fullscreen": ACT_TOGGLE_FULLSCREEN,
    "quit":       ACT_QUIT,
}

_started_at = time.monotonic()
_last_crash = ""


# ── host load, sampled at most once per DIAG_REFRESH_INTERVAL ─────────────
class _HostSample:
    def __init__(self) -> None:
        self.taken = float("-inf")
        self.values: dict[str, Any] = {}

    def get(self) -> dict[str, Any]:
        now = time.monotonic()
        if now - self.taken >= config.DIAG_REFRESH_INTERVAL:
            self.taken = now
            vm = psutil.virtual_memory()
            self.values = {
                "cpu_percent": psutil.cpu_percent(),
                "mem_used_mb": vm.used // 1024**2,
                "mem_percent": vm.percent,
            }
        return self.values


_host = _HostSample()


def show_status(app: "SlideshowApp") -> dict[str, Any]:
    """Viewer state for /diag: playback, drawing, textures, soundtrack."""
    rt = app.runtime
    return {
        "started":       rt.started,
        "frame_time":    round(rt.frame_time, 3),
        "loop_length":   rt.total_loop_duration,
        "loops":         rt.loops,
        "items":         len(rt.timeline),
        "items_drawn":   app.drawn,
        "textures":      len(app.textures),
        "overlay":       app.force_overlay,
        "soundtrack":    app.audio.path if app.audio else None,
        "fullscreen":    config.FULLSCREEN,
        "uptime_s":      int(time.monotonic() - _started_at),
        "last_http_crash": _last_crash,
        **_host.get(),
    }


def timeline_payload(runtime: SlideshowRuntime) -> dict[str, Any]:
    """Clock state and every item (draw order) with its current alpha."""
    return {
        "started":     runtime.started,
        "frameTime":   runtime.frame_time,
        "totalLoop":   runtime.total_loop_duration,
        "loops":       runtime.loops,
        "items": [
            {
                "source":   item.source,
                "position": list(item.position),
                "size":     list(item.size),
                "start":    item.start_time,
                "duration": item.duration,
                "fadeIn":   item.fade_in,
                "fadeOut":  item.fade_out,
                "alpha":    alpha if runtime.started else 0.0,
            }
            for item, alpha in runtime.alphas()
        ],
    }


def post_command(cmd: str) -> bool:
    """Queue the action for a remote *cmd*; False if the command is unknown."""
    act = _COMMANDS.get(cmd)
    if act is None:
        return False
    EventManager.post({"type": act})
    return True


# ── server ────────────────────────────────────────────────────────────────
class ReusableTCPServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    daemon_threads      = True
    allow_reuse_address = True


class RemoteHandler(http.server.BaseHTTPRequestHandler):
    def log_message(self, fmt, *args):
        log.debug("%s - %s", self.address_string(), fmt % args)

    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)
        app = self.server.app   # type: ignore

        if parsed.path == "/":
            return self._send(PAGE.encode("utf-8"), "text/html; charset=utf-8")
        if parsed.path == "/overlay":
            return self._send_json(overlay_lines(app.runtime))
        if parsed.path == "/timeline":
            return self._send_json(timeline_payload(app.runtime))
        if parsed.path == "/diag":
            return self._send_json(show_status(app))
        if parsed.path == "/log":
            return self._send_log()
        if parsed.path == "/action":
            cmd = urllib.parse.parse_qs(parsed.query).get("cmd", [""])[0]
            if not post_command(cmd):
                return self.send_error(400, "Unknown cmd")
            self.send_response(204)
            return self.end_headers()

        self.send_error(404, "Not found")

    def _send(self, body: bytes, ctype: str):
        self.send_response(200)
        self.send_header("Content-Type", ctype)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, obj: Any):
        self._send(json.dumps(obj).encode("utf-8"), "application/json")

    def _send_log(self):
        try:
            with open(config.LOG_FILE, "rb") as f:
                data = f.read()
        except (OSError, TypeError):
            return self.send_error(404, "Log file not found")
        self._send(data, "text/plain; charset=utf-8")


# ── control page ──────────────────────────────────────────────────────────
PAGE = """
<!doctype html><html><head><meta charset="utf-8">
<title>Slideshow remote</title>
<style>
 body{background:#111;color:#ddd;font-family:monospace;padding:1em;}
 button{margin:4px;padding:6px 12px;background:#222;color:#ddd;border:1px solid #666;}
 td,th{padding:2px 10px;text-align:right;} td.src{text-align:left;}
 tr.off{color:#555;}
</style></head><body>
<h2>Slideshow</h2>
<button onclick="cmd('start')">&#9654; Start</button>
<button onclick="cmd('toggle')">Overlay</button>
<button onclick="cmd('fullscreen')">Fullscreen</button>
<button onclick="cmd('quit')">Quit</button>
<a href="/log">log</a> <a href="/diag">diag</a>

<pre id="overlay"></pre>
<table><thead><tr><th>start</th><th>dur</th><th>alpha</th><th>source</th></tr></thead>
<tbody id="items"></tbody></table>

<script>
 function cmd(c){ fetch('/action?cmd=' + c); }
 async function refresh(){
   try {
     let ov = await (await fetch('/overlay')).json();
     document.getElementById('overlay').textContent = ov.join('\\n');
     let tl = await (await fetch('/timeline')).json();
     document.getElementById('items').innerHTML = tl.items.map(i =>
       `<tr class="${i.alpha > 0 ? '' : 'off'}"><td>${i.start.toFixed(1)}</td>` +
       `<td>${i.duration.toFixed(1)}</td><td>${i.alpha.toFixed(2)}</td>` +
       `<td class="src">${i.source}</td></tr>`).join('');
   } catch(e){
     console.error(e);
   }
 }
 setInterval(refresh, 500);
 refresh();
</script>
</body></html>
"""


def start(app: "SlideshowApp", port: int = config.WEB_PORT):
    """Serve on a daemon thread; a crashed server is restarted after 1 s."""
    def _serve_loop():
        global _last_crash
        while True:
            try:
                with ReusableTCPServer(("", port), RemoteHandler) as httpd:
                    httpd.app = app
                    httpd.serve_forever()
            except Exception:
                _last_crash = traceback.format_exc()
                log.exception("web remote crashed; restarting")
                time.sleep(1)

    threading.Thread(target=_serve_loop, daemon=True).start()
    log.info("Web remote listening on port %d", port)
