"""Post-build validator for adaptive media in the Pelican output.

Checks every <picture> element in the output/ directory before deployment:
each <source srcset> must point at a file that exists and every picture must
end with its fallback <img>. Also lists rendered widths under media/images
that no page references.

Usage:
    python validate_output.py                     # default: output/
    python validate_output.py --output-dir public # custom output directory

Exit codes:
    0 = all validations passed
    1 = validation errors found (missing widths or broken pictures)
"""
from __future__ import annotations

import argparse
import sys
from collections import defaultdict
from pathlib import Path
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from adaptive_media.library import IMAGE_EXT
from adaptive_media.processor import ADAPTIVE_ATTR


def normalize_path(href: str, source_html: Path, output_dir: Path) -> Path | None:
    """Convert a srcset/src value to a filesystem path, or None if external."""
    href = href.strip()
    if not href or href.startswith(('#', 'data:', '//')):
        return None

    parsed = urlparse(href)
    if parsed.scheme in ('http', 'https'):
        # Absolute URLs only count when they point back into the site root
        href = parsed.path
        if not href:
            return None

    # URL decode (library quotes file names)
    href = unquote(href)

    if href.startswith('/'):
        return (output_dir / href.lstrip('/')).resolve()
    return (source_html.parent / href).resolve()


def extract_pictures(html_file: Path) -> list[dict]:
    """Return sources and fallback info for each <picture> in a file."""
    try:
        soup = BeautifulSoup(html_file.read_text(encoding='utf-8'), 'html.parser')
    except (OSError, UnicodeDecodeError) as e:
        print(f"[WARN] Failed to parse {html_file}: {e}")
        return []

    pictures = []
    for picture in soup.find_all('picture'):
        children = picture.find_all(True, recursive=False)
        fallback = children[-1] if children and children[-1].name == 'img' else None
        pictures.append({
            'sources': [s.get('srcset', '') for s in picture.find_all('source')],
            'fallback': fallback,
            'asset_id': fallback.get(ADAPTIVE_ATTR.lower()) if fallback is not None else None,
        })
    return pictures


def validate_pictures(output_dir: Path) -> tuple[dict, dict, set[Path]]:
    """Returns (errors, notices, referenced_media)."""
    errors = defaultdict(list)
    notices = defaultdict(list)
    referenced_media = set()
    html_files = sorted(output_dir.rglob('*.html'))

    print(f"[INFO] Validating pictures in {len(html_files)} HTML files in {output_dir}...")

    for html_file in html_files:
        rel_source = str(html_file.relative_to(output_dir))
        for picture in extract_pictures(html_file):
            label = f"asset {picture['asset_id']}" if picture['asset_id'] else 'picture'
            if picture['fallback'] is None:
                errors[rel_source].append(f"{label}: no fallback <img> at the end of <picture>")
            if not picture['sources']:
                notices[rel_source].append(f"{label}: no rendered widths, fallback only")
            for srcset in picture['sources']:
                # srcset may list several candidates: "a.jpg 1x, b.jpg 2x"
                for candidate in srcset.split(','):
                    url = candidate.strip().split(' ')[0]
                    target = normalize_path(url, html_file, output_dir)
                    if target is None:
                        continue
                    referenced_media.add(target)
                    if not target.exists():
                        errors[rel_source].append(f"{label}: missing width {url}")

    return errors, notices, referenced_media


def find_orphaned_widths(output_dir: Path, referenced_media: set[Path]) -> list[Path]:
    """Rendered widths that exist but no <source> references."""
    images_dir = output_dir / 'media' / 'images'
    if not images_dir.exists():
        return []
    rendered = {
        p.resolve() for p in images_dir.glob('*/*')
        if p.is_file() and p.suffix.lower() in IMAGE_EXT
    }
    return sorted(rendered - referenced_media)


def print_report(errors: dict, notices: dict, orphaned: list[Path], output_dir: Path) -> int:
    """Print validation report and return exit code."""
    print("\n" + "=" * 70)
    print("ADAPTIVE MEDIA REPORT")
    print("=" * 70)

    if errors:
        total_errors = sum(len(v) for v in errors.values())
        print(f"\n[ERROR] {total_errors} broken picture reference(s):\n")
        for source, issues in sorted(errors.items()):
            print(f"  {source}:")
            for issue in issues:
                print(f"    - {issue}")
        print("\n  Re-render the missing widths into content/media/images/<asset>/ and rebuild.")
    else:
        print("\n[OK] All <picture> sources resolved.")

    if notices:
        print("\n[INFO] Pictures without rendered widths:")
        for source, issues in sorted(notices.items()):
            for issue in issues:
                print(f"  {source}: {issue}")

    if orphaned:
        print(f"\n[WARN] {len(orphaned)} rendered width(s) never referenced:")
        for media_file in orphaned[:10]:
            print(f"    - {media_file.relative_to(output_dir)}")
        if len(orphaned) > 10:
            print(f"    ... and {len(orphaned) - 10} more")

    print("\n" + "=" * 70)
    if errors:
        print("Validation FAILED - fix errors before deploying!")
        return 1
    print("Validation PASSED")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate adaptive media pictures in the Pelican output")
    parser.add_argument('--output-dir', default='output', help='Output directory to validate (default: output)')
    args = parser.parse_args(argv)

    output_dir = Path(args.output_dir).resolve()
    if not output_dir.exists():
        print(f"[ERROR] Output directory not found: {output_dir}")
        print("Run 'pelican content' to generate the site first.")
        return 1

    errors, notices, referenced_media = validate_pictures(output_dir)
    orphaned = find_orphaned_widths(output_dir, referenced_media)
    return print_report(errors, notices, orphaned, output_dir)


if __name__ == '__main__':
    sys.exit(main())
