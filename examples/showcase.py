#!/usr/bin/env python3
"""Reference showcase — runs standalone without external services.

Demonstrates:
  - Registering the function/class schema and a custom 'page' kind
  - Importing parsed doc-comment records into a ReferenceIndex
  - Term assignments and counts for source files, packages and versions
  - The sanitization pipeline, including a custom appended stage
  - Rendering a function page with hooks

Usage:
  python examples/showcase.py
"""

from dataclasses import dataclass
from typing import ClassVar

from docref_core import (
    CATEGORY_SINCE,
    ContentRenderer,
    EntityKind,
    HookRegistry,
    Importer,
    ReferenceIndex,
    SchemaRegistry,
    parse_records,
    register_reference_schema,
    sanitize,
    setup_logging,
)
from docref_core.sanitize import default_pipeline

RECORDS = """
[
  {
    "path": "wp-includes/post.php",
    "file": {"description": "Core Post API", "tags": [{"name": "package", "content": "WordPress"}, {"name": "subpackage", "content": "Post"}]},
    "functions": [
      {
        "name": "get_post",
        "line": 1021,
        "end_line": 1066,
        "arguments": [
          {"name": "$post", "default": "null"},
          {"name": "$output", "default": "OBJECT", "type": "string"},
          {"name": "$filter", "default": "'raw'", "type": "string"}
        ],
        "doc": {
          "description": "Retrieves post data given a post ID or post object.",
          "long_description": "See sanitize_post() for optional $filter values.",
          "tags": [
            {"name": "since", "content": "1.5.1"},
            {"name": "param", "content": "Optional. Post ID or post object. Default global $post.", "types": ["int", "WP_Post", "null"], "variable": "$post"},
            {"name": "param", "content": "Optional. The required return type. Default OBJECT.", "types": ["string"], "variable": "$output"},
            {"name": "param", "content": "Optional. Type of filter to apply. Accepts 'raw', 'edit', 'db', or 'display'.", "types": ["string"], "variable": "$filter"},
            {"name": "return", "types": ["WP_Post", "array", "null"]}
          ]
        }
      }
    ],
    "classes": [
      {"name": "WP_Post", "line": 20, "doc": {"description": "Core class used to implement the WP_Post object.", "tags": [{"name": "since", "content": "3.5.0"}]}}
    ]
  }
]
"""


@dataclass(frozen=True)
class TrimStage:
    """Example custom stage appended after the built-ins."""

    name: ClassVar[str] = "trim"

    def __call__(self, text: str) -> str:
        return text.strip()


def build_schema() -> SchemaRegistry:
    schema = register_reference_schema(SchemaRegistry())
    schema.define_entity_kind(EntityKind(name="page", label="Pages", slug="pages"))
    schema.freeze()
    return schema


def demo_sanitize() -> None:
    print("\n=== Sanitization Demo ===\n")

    raw = '<script>alert(1)</script>Returns "the" post -- see www.example.com... :)'
    clean = sanitize(raw)
    print(f"raw:   {raw}")
    print(f"clean: {clean}")
    print(f"idempotent: {sanitize(clean) == clean}")

    trimming = default_pipeline.extended(TrimStage())
    print(f"stages: {', '.join(trimming.stage_names)}")
    print(f"trimmed: {trimming('   padded   ')!r}")


def demo_import(index: ReferenceIndex) -> None:
    print("\n=== Import Demo ===\n")

    result = Importer(index).import_files(parse_records(RECORDS))
    print(f"Created {len(result.created)}, updated {len(result.updated)}, skipped {len(result.skipped)}")
    for category, counts in result.counts.items():
        print(f"  {category}: {counts}")

    # Importing the same records again updates in place
    again = Importer(index).import_files(parse_records(RECORDS))
    print(f"Re-import: created {len(again.created)}, updated {len(again.updated)}")

    for term in index.terms(CATEGORY_SINCE):
        print(f"  since {term.name} (parent={term.parent}, count={term.count})")


def demo_render(schema: SchemaRegistry, index: ReferenceIndex) -> None:
    print("\n=== Render Demo ===\n")

    hooks = HookRegistry()
    hooks.add("type-string-postprocess", lambda value: value.replace("WP_Post", '<a href="/classes/wp_post/">WP_Post</a>'))
    renderer = ContentRenderer(schema, hooks=hooks)

    function = index.find("function", "get_post")
    if function is None:
        raise RuntimeError("get_post was not imported")
    print(renderer.render(function, function.content))

    page = index.create("page", "About", content="<p>Plain page content</p>")
    print(f"\nPage passes through: {renderer.render(page, page.content)}")


def main() -> None:
    setup_logging(level="INFO")
    schema = build_schema()
    index = ReferenceIndex(schema)

    demo_sanitize()
    demo_import(index)
    demo_render(schema, index)

    print("\nAll demos completed successfully.")


if __name__ == "__main__":
    main()
