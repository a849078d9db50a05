# mirror_cli.py

from __future__ import annotations

import argparse
import json
from pathlib import Path

from cdn_mirror.core.catalog import CatalogQuery, build_catalog_response
from cdn_mirror.core.fetch.store import FetchStore
from cdn_mirror.logging import init_logging
from cdn_mirror.schemas.models import CatalogParams, MirrorConfig
from cdn_mirror.tools.seed import SeedRunner, build_seed_response


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Mirror CDN CSS/JS assets into a local cache")
    p.add_argument("--cache-root", type=str, default=None, help="Cache directory holding css/ and js/")
    p.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    p.add_argument("--user-agent", type=str, default=None)
    p.add_argument("--log-level", type=str, default="INFO")
    p.add_argument("--log-file", type=str, default=None)
    p.add_argument("--pretty", type=int, choices=(0, 1), default=1)

    sub = p.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed", help="Fetch every URL of a seed list")
    seed.add_argument("--file", type=str, default=None, help="Seed list (default: configured seed file)")
    seed.add_argument("--base-url", type=str, default=None, help="scheme://host used for accessUrl")

    cat = sub.add_parser("catalog", help="Query the cached assets")
    cat.add_argument("--type", dest="type", choices=("css", "js"), default=None)
    cat.add_argument("--q", type=str, default=None, help="Substring of the public path")
    cat.add_argument("--name", type=str, default=None, help="Library name substring (case-insensitive)")
    cat.add_argument("--updated-from", type=int, default=None, help="Epoch milliseconds, inclusive")
    cat.add_argument("--updated-to", type=int, default=None, help="Epoch milliseconds, inclusive")
    cat.add_argument("--sort-by", choices=("mtime", "name", "size"), default="mtime")
    cat.add_argument("--order", choices=("asc", "desc"), default="desc")
    cat.add_argument("--page", type=int, default=1)
    cat.add_argument("--page-size", type=int, default=30)
    return p


def _config_from_args(args: argparse.Namespace) -> MirrorConfig:
    return MirrorConfig.from_env(
        cache_root=Path(args.cache_root) if args.cache_root else None,
        timeout_s=args.timeout,
        user_agent=args.user_agent,
        public_base_url=getattr(args, "base_url", None),
    )


def run_seed(config: MirrorConfig, seed_file: Path | None = None) -> dict:
    config.ensure_roots()
    store = FetchStore(config)
    results = SeedRunner(store).run_seed_file(seed_file or config.seed_file)
    return build_seed_response(results, resolver=store.resolver)


def run_catalog(config: MirrorConfig, params: CatalogParams) -> dict:
    page = CatalogQuery(config).query(params)
    return build_catalog_response(page)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    init_logging(args.log_level, args.log_file)
    config = _config_from_args(args)

    if args.command == "seed":
        out = run_seed(config, Path(args.file) if args.file else None)
    else:
        params = CatalogParams.from_query(
            {
                "type": args.type,
                "q": args.q,
                "name": args.name,
                "updatedFrom": args.updated_from,
                "updatedTo": args.updated_to,
                "sortBy": args.sort_by,
                "order": args.order,
                "page": args.page,
                "pageSize": args.page_size,
            }
        )
        out = run_catalog(config, params)

    print(json.dumps(out, indent=2 if args.pretty else None, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
