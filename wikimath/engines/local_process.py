#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Local process engine
====================
Runs ``tex2mml.js`` under node.js for every page:

    node --stack-size=1024 --stack-trace-limit=1000 tex2mml.js \\
        --conf=<config file> --dist=1 -

The page goes to standard input; pages of 64 KiB and more are written to a
temporary file of their own, passed in place of ``-``.  The configuration
file is keyed by a hash of its content, so a changed configuration is never
shadowed by a stale file.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import hashlib
import logging
import os
import re
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from wikimath.core.config import Settings
from wikimath.engines.base import MATHML_PAGE_STYLE, BaseEngine
from wikimath.services.messages import MessageCatalog
from wikimath.services.output import PageOutput

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

STDIN_LIMIT = 65536

_NPM_VERSION_RE = re.compile(r"mathjax.+$", re.DOTALL)


class LocalProcessEngine(BaseEngine):
    """Render TeX with a node.js subprocess."""

    name = "local-process"

    def __init__(self, settings: Settings, messages: MessageCatalog) -> None:
        super().__init__(messages)
        self.settings = settings
        self.node_path = settings.node_path
        self.script = Path(settings.tex2mml_script)
        self.node_modules = Path(settings.node_modules)
        self.timeout = settings.engine_timeout

    def _config_file(self, config: str) -> Path:
        digest = hashlib.sha1(config.encode("utf-8")).hexdigest()[:16]
        path = Path(tempfile.gettempdir()) / f"wikimath.config.{digest}.json"
        if not path.exists():
            # Readers only ever see a complete file.
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix="wikimath.config.", suffix=".part", delete=False
            ) as part:
                part.write(config)
            os.replace(part.name, path)
        return path

    def _command(self, conf_file: Path, source: str) -> list[str]:
        return [
            self.node_path,
            "--stack-size=1024",
            "--stack-trace-limit=1000",
            str(self.script),
            f"--conf={conf_file}",
            "--dist=1",
            source,
        ]

    def tex2mml(self, html: str, config: str, lang: str) -> str:
        html_file: Optional[Path] = None
        try:
            conf_file = self._config_file(config)
            if len(html.encode("utf-8")) >= STDIN_LIMIT:
                with tempfile.NamedTemporaryFile("w", encoding="utf-8", prefix="tex_", delete=False) as page:
                    html_file = Path(page.name)
                    page.write(html)
                command, stdin = self._command(conf_file, str(html_file)), None
            else:
                command, stdin = self._command(conf_file, "-"), html
            result = subprocess.run(
                command,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env={**os.environ, "NODE_PATH": str(self.node_modules)},
            )
        except subprocess.TimeoutExpired:
            logger.warning("tex2mml timed out after %.1fs", self.timeout)
            return self.error_marker("mathjax-broken-tex", f"timeout after {self.timeout:g}s") + html
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("tex2mml could not be run: %s", exc)
            return self.error_marker("mathjax-broken-tex", str(exc)) + html
        finally:
            if html_file is not None:
                html_file.unlink(missing_ok=True)

        if result.returncode == 0:
            return result.stdout
        logger.warning("tex2mml exited with code %d", result.returncode)
        return self.error_marker("mathjax-broken-tex", result.stderr.strip()) + html

    def process_page(self, out: PageOutput) -> None:
        out.add_inline_style(MATHML_PAGE_STYLE)

    def browser_script_basename(self) -> str:
        return "mml-chtml.js"

    def server_side_dir(self) -> Optional[str]:
        return f"{self.settings.extension_assets_path}{self.settings.local_distribution}"

    def version(self) -> Optional[str]:
        prefix = self.node_modules.resolve().parent
        try:
            result = subprocess.run(
                ["npm", "list", "-l", "--prefix", str(prefix), "mathjax-full"],
                capture_output=True, text=True, timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("npm list failed: %s", exc)
            return None
        if result.returncode != 0:
            return None
        match = _NPM_VERSION_RE.search(result.stdout)
        return match.group(0).strip() if match else None


# -----------------------------------------------------------------------------
