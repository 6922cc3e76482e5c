from __future__ import annotations

import logging
from concurrent.futures import TimeoutError as FutureTimeout
from html import escape
from string import Template

from flask import Flask, abort, jsonify

from .config import APP_VERSION, SETTINGS, configure_logging
from .infrastructure.responses import send_png
from .models import DirectoryState
from .runner import LoopRunner
from .service import MemeService

logger = logging.getLogger(__name__)

PAGE = Template(
    """<!doctype html>
<html>
<head><meta charset="utf-8"><title>$title</title></head>
<body>
<h1>$title</h1>
$body
<footer><small>meme-viewer $version</small></footer>
</body>
</html>"""
)

STATE_MESSAGES = {
    DirectoryState.LOADING: "Loading memes...",
    DirectoryState.EMPTY: "The meme API returned no memes.",
    DirectoryState.UNAVAILABLE: "The meme directory is unavailable right now.",
}


def render_page(title: str, body: str) -> str:
    return PAGE.substitute(title=escape(title), body=body, version=APP_VERSION)


def create_app(
    service: MemeService | None = None,
    runner: LoopRunner | None = None,
    *,
    load_directory: bool = True,
) -> Flask:
    configure_logging()
    app = Flask(__name__)

    service = service or MemeService()
    runner = runner or LoopRunner()
    runner.start()
    app.extensions["meme_service"] = service
    app.extensions["meme_runner"] = runner

    if load_directory:
        logger.info("Starting initial meme directory load")
        app.extensions["meme_startup"] = runner.submit(service.fetch_meme_directory())

    def lookup(meme_id: str):
        # the directory tuple is replaced wholesale, reading it here is safe
        meme = service.find(meme_id)
        if meme is None:
            abort(404, description=f"Unknown meme {meme_id}")
        return meme

    @app.route("/")
    def index():
        if service.state is not DirectoryState.READY:
            body = f"<p>{escape(STATE_MESSAGES[service.state])}</p>"
        else:
            items = "".join(
                f'<li><a href="/memes/{escape(meme.id)}">{escape(meme.title)}</a></li>'
                for meme in service.memes
            )
            body = f"<ul>{items}</ul>"
        return render_page("Memes", body)

    @app.route("/memes")
    def list_memes():
        return jsonify(
            state=service.state.value,
            memes=[meme.to_dict() for meme in service.memes],
        )

    @app.route("/memes/refresh", methods=["POST"])
    def refresh():
        try:
            result = runner.run(service.fetch_meme_directory(), timeout=SETTINGS.view_timeout)
        except FutureTimeout:
            return jsonify(ok=False, state=service.state.value, error="timeout"), 504
        if not result.ok:
            return (
                jsonify(
                    ok=False,
                    state=service.state.value,
                    error=result.error.kind,
                    detail=str(result.error),
                ),
                502,
            )
        return jsonify(ok=True, state=service.state.value, count=len(service.memes))

    @app.route("/memes/<meme_id>")
    def meme_detail(meme_id: str):
        meme = lookup(meme_id)
        body = (
            f'<img src="/memes/{escape(meme.id)}/image" alt="{escape(meme.title)}">'
            f"<p>Rating: {meme.rating}</p>"
            '<p><a href="/">Back</a></p>'
        )
        return render_page(meme.title, body)

    @app.route("/memes/<meme_id>/image")
    def meme_image(meme_id: str):
        meme = lookup(meme_id)
        try:
            result = runner.run(service.image_for(meme), timeout=SETTINGS.view_timeout)
        except FutureTimeout:
            return (f"Timed out loading image for {meme.id}", 504)
        if not result.ok:
            return (f"{result.error.kind}: {result.error}", 502)
        return send_png(result.value)

    @app.route("/health")
    def health():
        return jsonify(
            ok=service.state is DirectoryState.READY,
            state=service.state.value,
            memes=len(service.memes),
            cached_images=len(service.cache),
        )

    return app
