#!/usr/bin/env python3
import argparse
import inspect
import logging
import os
import re
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import (
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Set,
    Tuple,
    Type,
    Union,
)
from urllib.parse import parse_qsl, unquote, urljoin, urlparse

import requests
from bs4 import BeautifulSoup, Tag
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

# -------------------- Config --------------------

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36",
    "Accept-Language": "en-US,en;q=0.7",
}

SRCSET_SPLIT_RE = re.compile(r"\s*,\s*")
WS_RE = re.compile(r"\s+")
INVALID_FILENAME_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
MAX_FILENAME_LEN = 200

DEFAULT_OUTPUT_DIR = "cloned-site"
INDEX_FILE = "index.html"
CSS_DIR = "css"
IMAGES_DIR = "images"
JS_DIR = "js"

IMAGE_FAILED_ALT = "Image failed to download"
# data-nimg is the Next.js sizing marker
IMAGE_DISCARD_ATTRS = ("srcset", "data-src", "data-nimg")
IMAGE_TYPE_EXTS = (
    ("png", "png"),
    ("gif", "gif"),
    ("webp", "webp"),
    ("svg", "svg"),
)
DEFAULT_IMAGE_EXT = "jpg"


@dataclass
class Settings:
    timeout: float = 10.0
    max_bytes: int = 50_000_000
    retries: int = 0

    # Rendering
    render_js: bool = True
    render_timeout_ms: int = 30000
    wait_until: str = "load"
    idle_connections: int = 2
    idle_ms: int = 500


# -------------------- Errors --------------------


class CloneError(RuntimeError):
    """Fatal failure: the clone job is aborted and no snapshot is written."""


class OutputDirError(CloneError):
    pass


class RenderError(CloneError):
    pass


class AssetFetchError(Exception):
    pass


class UnknownToolError(KeyError):
    pass


# -------------------- Model --------------------


@dataclass(frozen=True)
class CloneRequest:
    source_url: str
    output_dir: str = DEFAULT_OUTPUT_DIR

    _URL_KEYS = ("sourceUrl", "url", "source_url")
    _DIR_KEYS = ("outputDir", "output_dir")

    @classmethod
    def from_input(
        cls, raw: Union["CloneRequest", str, Mapping[str, object]]
    ) -> "CloneRequest":
        if isinstance(raw, CloneRequest):
            return raw
        if isinstance(raw, str):
            if not raw.strip():
                raise ValueError("clone request needs a source URL")
            return cls(raw.strip())
        if not isinstance(raw, Mapping):
            raise ValueError(f"unsupported clone request input: {type(raw).__name__}")
        unknown = set(raw) - set(cls._URL_KEYS) - set(cls._DIR_KEYS)
        if unknown:
            raise ValueError(f"unknown clone request field(s): {sorted(unknown)}")
        url = next((raw[k] for k in cls._URL_KEYS if raw.get(k)), None)
        if not isinstance(url, str) or not url.strip():
            raise ValueError("clone request needs a source URL")
        out = next((raw[k] for k in cls._DIR_KEYS if raw.get(k)), DEFAULT_OUTPUT_DIR)
        return cls(url.strip(), str(out))


@dataclass
class ResolvedAsset:
    absolute_url: str
    content: bytes
    content_type: str
    suggested_name: str


@dataclass(frozen=True)
class FileSlot:
    directory: Path
    filename: str

    @property
    def path(self) -> Path:
        return self.directory / self.filename


@dataclass(frozen=True)
class OutputLayout:
    root: Path
    css: Path
    images: Path
    js: Path

    @property
    def index_html(self) -> Path:
        return self.root / INDEX_FILE


@dataclass
class AssetTally:
    saved: int = 0
    failed: int = 0

    def __str__(self) -> str:
        return f"{self.saved}/{self.saved + self.failed}"


class Stage(Enum):
    PREPARING = "preparing"
    RENDERING = "rendering"
    EXTRACTING_CSS = "extracting css"
    EXTRACTING_IMAGES = "extracting images"
    EXTRACTING_JS = "extracting js"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class CloneReport:
    request: CloneRequest
    layout: Optional[OutputLayout] = None
    stage: Stage = Stage.PREPARING
    css: AssetTally = field(default_factory=AssetTally)
    images: AssetTally = field(default_factory=AssetTally)
    js: AssetTally = field(default_factory=AssetTally)

    def advance(self, stage: Stage) -> None:
        logging.debug("stage: %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def status(self) -> str:
        where = self.layout.root if self.layout else self.request.output_dir
        return (
            f"Site Cloned: {self.request.source_url} -> {where} "
            f"(css {self.css}, images {self.images}, js {self.js})"
        )


# -------------------- Utils --------------------


def sanitize_filename(name: str) -> str:
    name = INVALID_FILENAME_CHARS_RE.sub("_", name)
    if name.startswith("."):
        name = "_" + name[1:]
    if len(name) > MAX_FILENAME_LEN:
        stem, ext = os.path.splitext(name)
        ext = ext[:16]
        name = stem[: MAX_FILENAME_LEN - len(ext)] + ext
    return name


def can_fetch_url(u: Optional[str]) -> bool:
    if not u:
        return False
    u = u.strip().lower()
    if not u or u.startswith(("#", "mailto:", "tel:", "javascript:", "data:", "blob:")):
        return False
    return True


def url_basename(url: str) -> str:
    """Last path segment of ``url`` with query and fragment dropped."""
    name = os.path.basename(urlparse(url).path)
    return sanitize_filename(unquote(name)) if name else ""


def build_session(
    headers: Optional[Dict[str, str]] = None, retries: int = 0
) -> requests.Session:
    s = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.5,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods={"GET", "HEAD"},
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update(DEFAULT_HEADERS if headers is None else headers)
    return s


def allocate_slot(directory: Path, filename: str) -> FileSlot:
    """Pick a free name in ``directory``: name.ext, name_1.ext, name_2.ext, ..."""
    stem, ext = os.path.splitext(filename)
    candidate = filename
    counter = 1
    while (directory / candidate).exists():
        candidate = f"{stem}_{counter}{ext}"
        counter += 1
    return FileSlot(directory, candidate)


def image_ext_for_type(content_type: Optional[str]) -> str:
    ct = (content_type or "").lower()
    for marker, ext in IMAGE_TYPE_EXTS:
        if marker in ct:
            return ext
    return DEFAULT_IMAGE_EXT


def parse_srcset(v: str) -> List[str]:
    urls: List[str] = []
    if not v:
        return urls
    for cand in SRCSET_SPLIT_RE.split(v.strip()):
        if not cand:
            continue
        parts = WS_RE.split(cand.strip())
        if parts and parts[0]:
            urls.append(parts[0])
    return urls


# -------------------- HTTP --------------------


def fetch_asset(
    session: requests.Session,
    url: str,
    *,
    referer: str,
    timeout: float,
    max_bytes: int,
) -> ResolvedAsset:
    resp = session.get(url, headers={"Referer": referer}, timeout=timeout, stream=True)
    try:
        resp.raise_for_status()
        body = bytearray()
        for chunk in resp.iter_content(chunk_size=64 * 1024):
            if not chunk:
                continue
            body.extend(chunk)
            if len(body) > max_bytes:
                raise AssetFetchError(f"larger than {max_bytes} bytes")
        content_type = resp.headers.get("Content-Type") or ""
    finally:
        resp.close()
    if not body:
        raise AssetFetchError("empty response")
    return ResolvedAsset(url, bytes(body), content_type, url_basename(url))


# -------------------- Markup model --------------------


def bs4_parse(html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html, "lxml")
    except Exception:
        return BeautifulSoup(html, "html.parser")


class MarkupDocument:
    """Parsed page owned by one clone job; extractors rewrite it in place."""

    def __init__(self, html: str):
        self.soup = bs4_parse(html)

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def base_url(self, fallback: str) -> str:
        tag = self.soup.find("base", href=True)
        if tag and tag.get("href"):
            try:
                return urljoin(fallback, tag["href"])
            except ValueError:
                logging.debug("ignoring malformed <base href=%r>", tag["href"])
        return fallback

    @staticmethod
    def get_attr(tag: Tag, name: str) -> Optional[str]:
        value = tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    @staticmethod
    def set_attr(tag: Tag, name: str, value: str) -> None:
        tag[name] = value

    @staticmethod
    def remove_attrs(tag: Tag, *names: str) -> None:
        for name in names:
            if name in tag.attrs:
                del tag.attrs[name]

    def serialize(self) -> str:
        try:
            return self.soup.decode(formatter="html")
        except Exception:
            return str(self.soup)


# -------------------- Rendering --------------------


def wait_for_quiet_network(
    page,
    inflight: Set[object],
    *,
    max_inflight: int,
    idle_ms: int,
    timeout_ms: int,
    poll_ms: int = 50,
) -> None:
    """Block until at most ``max_inflight`` requests stay open for ``idle_ms``."""
    deadline = time.monotonic() + timeout_ms / 1000.0
    quiet_since: Optional[float] = None
    while True:
        now = time.monotonic()
        if len(inflight) <= max_inflight:
            if quiet_since is None:
                quiet_since = now
            if (now - quiet_since) * 1000.0 >= idle_ms:
                return
        else:
            quiet_since = None
        if now >= deadline:
            raise RenderError(
                f"network did not go idle within {timeout_ms} ms "
                f"({len(inflight)} requests in flight)"
            )
        page.wait_for_timeout(poll_ms)


class PageRenderer:
    def render(self, url: str) -> str:
        raise NotImplementedError


class StaticRenderer(PageRenderer):
    def __init__(self, session: requests.Session, settings: Settings):
        self.session = session
        self.settings = settings

    def render(self, url: str) -> str:
        try:
            r = self.session.get(url, timeout=self.settings.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise RenderError(f"failed to fetch {url}: {e}") from e
        if not r.encoding:
            r.encoding = r.apparent_encoding or "utf-8"
        return r.text


class PlaywrightRenderer(PageRenderer):
    def __init__(self, settings: Settings, user_agent: Optional[str] = None):
        self.settings = settings
        self.user_agent = user_agent or DEFAULT_HEADERS["User-Agent"]

    def render(self, url: str) -> str:
        s = self.settings
        try:
            with sync_playwright() as pw:
                browser = pw.chromium.launch(headless=True)
                try:
                    context = browser.new_context(user_agent=self.user_agent)
                    page = context.new_page()
                    inflight: Set[object] = set()
                    page.on("request", inflight.add)
                    page.on("requestfinished", inflight.discard)
                    page.on("requestfailed", inflight.discard)
                    page.goto(url, wait_until=s.wait_until, timeout=s.render_timeout_ms)
                    wait_for_quiet_network(
                        page,
                        inflight,
                        max_inflight=s.idle_connections,
                        idle_ms=s.idle_ms,
                        timeout_ms=s.render_timeout_ms,
                    )
                    return page.content()
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise RenderError(f"failed to render {url}: {e}") from e


def get_renderer(settings: Settings, session: requests.Session) -> PageRenderer:
    if settings.render_js:
        return PlaywrightRenderer(settings, session.headers.get("User-Agent"))
    return StaticRenderer(session, settings)


# -------------------- Output --------------------


def prepare_output(output_dir: Union[str, Path]) -> OutputLayout:
    root = Path(output_dir).expanduser().resolve()
    layout = OutputLayout(root, root / CSS_DIR, root / IMAGES_DIR, root / JS_DIR)
    try:
        for d in (layout.root, layout.css, layout.images, layout.js):
            d.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirError(f"cannot create output directory {root}: {e}") from e
    logging.debug("output directory: %s", root)
    return layout


def write_snapshot(doc: MarkupDocument, layout: OutputLayout) -> Path:
    path = layout.index_html
    path.write_text(doc.serialize(), encoding="utf-8")
    return path


# -------------------- Stylesheets / scripts --------------------


@dataclass(frozen=True)
class LinkedAssetKind:
    label: str
    selector: str
    attr: str
    subdir: str
    fallback_stem: str
    extension: str


STYLESHEETS = LinkedAssetKind(
    "css", "link[rel~=stylesheet i][href]", "href", CSS_DIR, "style", ".css"
)
SCRIPTS = LinkedAssetKind("js", "script[src]", "src", JS_DIR, "script", ".js")


def linked_asset_filename(kind: LinkedAssetKind, asset: ResolvedAsset, index: int) -> str:
    name = asset.suggested_name or f"{kind.fallback_stem}{index}{kind.extension}"
    if not os.path.splitext(name)[1]:
        name += kind.extension
    return name


def extract_linked_assets(
    doc: MarkupDocument,
    kind: LinkedAssetKind,
    directory: Path,
    session: requests.Session,
    page_url: str,
    settings: Settings,
) -> AssetTally:
    tally = AssetTally()
    base = doc.base_url(page_url)
    for index, tag in enumerate(doc.select(kind.selector)):
        ref = doc.get_attr(tag, kind.attr)
        if not can_fetch_url(ref):
            continue
        try:
            asset = fetch_asset(
                session,
                urljoin(base, ref.strip()),
                referer=page_url,
                timeout=settings.timeout,
                max_bytes=settings.max_bytes,
            )
            slot = allocate_slot(directory, linked_asset_filename(kind, asset, index))
            slot.path.write_bytes(asset.content)
        except (requests.RequestException, AssetFetchError, ValueError, OSError) as e:
            logging.error("failed to download %s: %s (%s)", kind.label, ref, e)
            tally.failed += 1
            continue
        doc.set_attr(tag, kind.attr, f"{kind.subdir}/{slot.filename}")
        tally.saved += 1
        logging.info("saved %s: %s -> %s", kind.label, asset.absolute_url, slot.filename)
    return tally


# -------------------- Images --------------------


@dataclass(frozen=True)
class ImageProxy:
    """Query-based image optimizer URL whose ``param`` carries the real target."""

    name: str
    path_suffix: str
    param: str

    def decode(self, src: str) -> Optional[str]:
        p = urlparse(src)
        if not p.path.endswith(self.path_suffix):
            return None
        for k, v in parse_qsl(p.query):
            if k == self.param and v.strip():
                return v.strip()
        return None


IMAGE_PROXIES: Tuple[ImageProxy, ...] = (
    ImageProxy("next", "/_next/image", "url"),
    ImageProxy("vercel", "/_vercel/image", "url"),
    ImageProxy("netlify", "/.netlify/images", "url"),
)


def decode_proxied_src(src: str) -> Optional[str]:
    for proxy in IMAGE_PROXIES:
        try:
            target = proxy.decode(src)
        except ValueError as e:
            logging.debug("could not decode %s image URL %s: %s", proxy.name, src, e)
            continue
        if target:
            return target
    return None


def image_candidates(doc: MarkupDocument, tag: Tag) -> List[str]:
    src = doc.get_attr(tag, "src")
    srcset = parse_srcset(doc.get_attr(tag, "srcset") or "")
    ordered = [
        decode_proxied_src(src) if src else None,
        src,
        doc.get_attr(tag, "data-src"),
        srcset[0] if srcset else None,
    ]
    return list(dict.fromkeys(c.strip() for c in ordered if c and c.strip()))


def image_filename(asset: ResolvedAsset, position: int) -> str:
    name = asset.suggested_name or f"image{position}"
    if not os.path.splitext(name)[1]:
        name = f"{name}.{image_ext_for_type(asset.content_type)}"
    return name


def _image_attempts(
    candidates: List[str],
    base: str,
    session: requests.Session,
    page_url: str,
    settings: Settings,
) -> Iterator[Optional[ResolvedAsset]]:
    for cand in candidates:
        if not can_fetch_url(cand):
            yield None
            continue
        try:
            yield fetch_asset(
                session,
                urljoin(base, cand),
                referer=page_url,
                timeout=settings.timeout,
                max_bytes=settings.max_bytes,
            )
        except (requests.RequestException, AssetFetchError, ValueError) as e:
            logging.debug("image candidate failed %s: %s", cand, e)
            yield None


def extract_images(
    doc: MarkupDocument,
    directory: Path,
    session: requests.Session,
    page_url: str,
    settings: Settings,
) -> AssetTally:
    tally = AssetTally()
    base = doc.base_url(page_url)
    for position, tag in enumerate(doc.select("img"), start=1):
        src = doc.get_attr(tag, "src")
        if src and src.strip().lower().startswith("data:"):
            continue
        candidates = image_candidates(doc, tag)
        attempts = _image_attempts(candidates, base, session, page_url, settings)
        asset = next((a for a in attempts if a is not None), None)
        slot: Optional[FileSlot] = None
        if asset is not None:
            try:
                slot = allocate_slot(directory, image_filename(asset, position))
                slot.path.write_bytes(asset.content)
            except (OSError, ValueError) as e:
                logging.error("failed to write image %s: %s", asset.absolute_url, e)
                slot = None
        if slot is None:
            tally.failed += 1
            logging.error("all sources failed for image %d", position)
            doc.set_attr(tag, "alt", IMAGE_FAILED_ALT)
            continue
        doc.set_attr(tag, "src", f"{IMAGES_DIR}/{slot.filename}")
        doc.remove_attrs(tag, *IMAGE_DISCARD_ATTRS)
        tally.saved += 1
        logging.info(
            "saved image: %s (%.1fKB)", slot.filename, len(asset.content) / 1024
        )
    logging.info("image summary: %d successful, %d failed", tally.saved, tally.failed)
    return tally


# -------------------- Main: clone --------------------


def run_clone(
    request: CloneRequest,
    settings: Optional[Settings] = None,
    *,
    session: Optional[requests.Session] = None,
    renderer: Optional[PageRenderer] = None,
) -> CloneReport:
    settings = settings or Settings()
    report = CloneReport(request)
    own_session = session is None
    if session is None:
        session = build_session(retries=settings.retries)
    url = request.source_url
    try:
        try:
            layout = prepare_output(request.output_dir)
            report.layout = layout
            report.advance(Stage.RENDERING)
            if renderer is None:
                renderer = get_renderer(settings, session)
            logging.info("rendering %s", url)
            html = renderer.render(url)
        except CloneError:
            report.advance(Stage.FAILED)
            raise
        doc = MarkupDocument(html)

        report.advance(Stage.EXTRACTING_CSS)
        report.css = extract_linked_assets(
            doc, STYLESHEETS, layout.css, session, url, settings
        )
        report.advance(Stage.EXTRACTING_IMAGES)
        report.images = extract_images(doc, layout.images, session, url, settings)
        report.advance(Stage.EXTRACTING_JS)
        report.js = extract_linked_assets(doc, SCRIPTS, layout.js, session, url, settings)

        report.advance(Stage.FINALIZING)
        path = write_snapshot(doc, layout)
        logging.info("saved snapshot: %s", path)
        report.advance(Stage.DONE)
    finally:
        if own_session:
            session.close()
    return report


def clone_site(
    request: CloneRequest,
    settings: Optional[Settings] = None,
    *,
    session: Optional[requests.Session] = None,
    renderer: Optional[PageRenderer] = None,
) -> str:
    return run_clone(request, settings, session=session, renderer=renderer).status()


# -------------------- Tools --------------------


@dataclass(frozen=True)
class Tool:
    name: str
    input_type: Type
    func: Callable[..., str]
    description: str = ""


class ToolRegistry:
    """Named operations with a fixed input type, validated when registered."""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(
        self,
        name: str,
        func: Callable[..., str],
        input_type: Type,
        description: str = "",
    ) -> Tool:
        if name in self._tools:
            raise ValueError(f"tool already registered: {name}")
        if not callable(getattr(input_type, "from_input", None)):
            raise TypeError(f"{input_type.__name__} has no from_input()")
        required = [
            p
            for p in inspect.signature(func).parameters.values()
            if p.default is p.empty
            and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        ]
        if len(required) != 1:
            raise TypeError(f"tool {name} must take exactly one required argument")
        if required[0].annotation not in (inspect.Parameter.empty, input_type):
            raise TypeError(
                f"tool {name} takes {required[0].annotation!r}, "
                f"declared input is {input_type.__name__}"
            )
        tool = Tool(name, input_type, func, description)
        self._tools[name] = tool
        return tool

    def names(self) -> List[str]:
        return sorted(self._tools)

    def invoke(self, name: str, raw_input: object) -> str:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return tool.func(tool.input_type.from_input(raw_input))


TOOLS = ToolRegistry()
TOOLS.register(
    "cloneWebsite",
    clone_site,
    CloneRequest,
    "Clone one page (HTML, stylesheets, images, scripts) into a local folder.",
)


# -------------------- Config loader --------------------

CONFIG_GROUPS = ("general", "fetch", "render")


def load_config_file(path: str) -> Dict[str, Union[str, int, float, bool]]:
    p = Path(path)
    suf = p.suffix.lower()
    if suf in {".toml", ".tml"}:
        import tomllib

        with open(p, "rb") as f:
            return tomllib.load(f) or {}
    elif suf in {".yaml", ".yml"}:
        import yaml

        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise RuntimeError("Top-level YAML must be a mapping")
            return data
    else:
        raise RuntimeError("Unsupported config format. Use .toml or .yaml")


# -------------------- CLI --------------------


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Clone a single web page with its stylesheets, images and scripts.",
    )
    p.add_argument("--config", type=str, help="path to config.toml|.yaml", default=None)

    p.add_argument("url", help="http(s) URL")
    p.add_argument(
        "output_folder",
        nargs="?",
        default=DEFAULT_OUTPUT_DIR,
        help="output directory (default: %(default)s)",
    )
    p.add_argument(
        "--timeout", type=float, default=10.0, help="asset request timeout seconds"
    )
    p.add_argument(
        "--max-bytes", type=int, default=50_000_000, help="max bytes per asset"
    )
    p.add_argument(
        "--retries", type=int, default=0, help="retries for 429/5xx asset responses"
    )
    p.add_argument("--verbose", action="store_true", help="debug logging")

    # render
    p.add_argument(
        "--no-render",
        action="store_true",
        help="fetch the page over plain HTTP instead of a headless browser",
    )
    p.add_argument(
        "--render-timeout-ms", type=int, default=30000, help="page load timeout ms"
    )
    p.add_argument(
        "--wait-until", type=str, default="load", help="Playwright wait_until"
    )
    p.add_argument(
        "--idle-connections",
        type=int,
        default=2,
        help="in-flight requests tolerated when waiting for network idle",
    )
    p.add_argument(
        "--idle-ms", type=int, default=500, help="quiet period before reading the page"
    )
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_arg_parser()
    preliminary, _ = parser.parse_known_args(argv)
    if preliminary.config:
        cfg = load_config_file(preliminary.config)
        if isinstance(cfg, dict):
            flat = {k: v for k, v in cfg.items() if not isinstance(v, dict)}
            for g in CONFIG_GROUPS:
                if isinstance(cfg.get(g), dict):
                    flat.update(cfg[g])
            parser.set_defaults(**{k.replace("-", "_"): v for k, v in flat.items()})
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        timeout=max(0.1, args.timeout),
        max_bytes=max(1024, args.max_bytes),
        retries=max(0, args.retries),
        render_js=not args.no_render,
        render_timeout_ms=max(1000, args.render_timeout_ms),
        wait_until=args.wait_until,
        idle_connections=max(0, args.idle_connections),
        idle_ms=max(0, args.idle_ms),
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    if urlparse(args.url).scheme not in {"http", "https"}:
        print("Invalid URL. Use http:// or https://")
        sys.exit(1)

    settings = settings_from_args(args)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    print("Reminder: only clone content you own or have permission to copy.")
    try:
        status = clone_site(CloneRequest(args.url, args.output_folder), settings)
    except CloneError as e:
        print(f"Critical error: {e}")
        sys.exit(1)
    print(status)


if __name__ == "__main__":
    main()
