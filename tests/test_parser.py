"""Tests for the line-oriented schema parser.

Covers model block detection, field markers and attributes, relation
detection, unclosed models, malformed lines and file read failures.
"""

import ast
import textwrap
from pathlib import Path

import pytest

from ramp.schema.models import RelationType
from ramp.schema.parser import (
    SchemaReadError,
    SchemaSyntaxError,
    attribute_argument,
    normalize_type,
    parse_field,
    parse_schema,
    parse_schema_text,
)

PARSER_PATH = Path(__file__).parent.parent / "src" / "ramp" / "schema" / "parser.py"

BLOG_SCHEMA = textwrap.dedent("""\
    datasource db {
      provider = "sqlite"
      url      = env("DATABASE_URL")
    }

    generator client {
      provider = "prisma-client-js"
    }

    model User {
      id    Int    @id @default(autoincrement())
      email String @unique
      posts Post[]
    }

    model Post {
      id        Int     @id @unique
      title     String
      published Boolean? @default(false)
      author    User    @relation("UserPosts", fields: [authorId], references: [id])
      authorId  Int
    }
""")


class TestParseSchemaText:
    """Model block handling."""

    def test_models_in_declaration_order(self) -> None:
        models = parse_schema_text(BLOG_SCHEMA)
        assert [m.name for m in models] == ["User", "Post"]

    def test_fields_in_declaration_order(self) -> None:
        post = parse_schema_text(BLOG_SCHEMA)[1]
        assert [f.name for f in post.fields] == [
            "id",
            "title",
            "published",
            "author",
            "authorId",
        ]

    def test_datasource_and_generator_ignored(self) -> None:
        models = parse_schema_text(BLOG_SCHEMA)
        names = {f.name for m in models for f in m.fields}
        assert "provider" not in names
        assert "url" not in names

    def test_brace_on_next_line(self) -> None:
        text = "model Tag\n{\n  label String\n}\n"
        models = parse_schema_text(text)
        assert len(models) == 1
        assert models[0].name == "Tag"
        assert [f.name for f in models[0].fields] == ["label"]

    def test_unclosed_model_committed_at_end(self) -> None:
        models = parse_schema_text("model Draft {\n  body String\n")
        assert [m.name for m in models] == ["Draft"]
        assert models[0].fields[0].name == "body"

    def test_new_model_header_commits_open_model(self) -> None:
        text = "model A {\n  x Int\nmodel B {\n  y Int\n}\n"
        models = parse_schema_text(text)
        assert [m.name for m in models] == ["A", "B"]
        assert [f.name for f in models[0].fields] == ["x"]

    def test_blank_lines_ignored(self) -> None:
        text = "model A {\n\n  x Int\n\n}\n"
        assert len(parse_schema_text(text)[0].fields) == 1

    def test_comments_and_block_attributes_ignored(self) -> None:
        text = textwrap.dedent("""\
            model A {
              // primary key
              x Int
              @@index([x])
            }
        """)
        fields = parse_schema_text(text)[0].fields
        assert [f.name for f in fields] == ["x"]

    def test_field_named_like_keyword_prefix_is_a_field(self) -> None:
        text = "model A {\n  modelName String\n}\n"
        models = parse_schema_text(text)
        assert len(models) == 1
        assert models[0].fields[0].name == "modelName"

    def test_field_named_exactly_model_opens_a_model(self) -> None:
        text = "model Car {\n  id Int\n  model String\n  year Int\n}\n"
        models = parse_schema_text(text)
        assert [m.name for m in models] == ["Car", "String"]
        assert [f.name for f in models[0].fields] == ["id"]
        assert [f.name for f in models[1].fields] == ["year"]

    def test_duplicate_field_names_kept_in_order(self) -> None:
        text = "model A {\n  x Int\n  x String\n}\n"
        model = parse_schema_text(text)[0]
        assert [f.type for f in model.fields] == ["Int", "String"]
        assert model.get_field("x").type == "String"

    def test_empty_text(self) -> None:
        assert parse_schema_text("") == []

    def test_malformed_field_line_raises(self) -> None:
        with pytest.raises(SchemaSyntaxError) as exc_info:
            parse_schema_text("model A {\n  lonely\n}\n")
        assert exc_info.value.line_number == 2
        assert isinstance(exc_info.value, ValueError)


class TestParseField:
    """Field markers and attributes."""

    def test_post_scenario_fields(self) -> None:
        post = parse_schema_text(BLOG_SCHEMA)[1]
        id_field, title, published = post.fields[:3]

        assert id_field.is_required and id_field.is_unique
        assert title.is_required and not title.is_unique
        assert title.default is None
        assert not published.is_required
        assert published.type == "Boolean"
        assert published.default == "false"

    def test_list_marker(self) -> None:
        field = parse_field("posts Post[]")
        assert field.is_list
        assert field.is_required
        assert field.type == "Post"

    def test_optional_marker(self) -> None:
        field = parse_field("bio String?")
        assert not field.is_required
        assert not field.is_list
        assert field.type == "String"

    def test_only_first_marker_stripped(self) -> None:
        field = parse_field("tags Tag[]?")
        assert field.is_list
        assert not field.is_required
        assert field.type == "Tag?"

    def test_nested_parentheses_in_default(self) -> None:
        field = parse_field("createdAt DateTime @default(now())")
        assert field.default == "now()"

    def test_default_with_spaces(self) -> None:
        field = parse_field('status String @default("in review")')
        assert field.default == '"in review"'

    def test_no_relation_without_attribute(self) -> None:
        assert parse_field("posts Post[]").relation is None

    def test_single_token_raises(self) -> None:
        with pytest.raises(SchemaSyntaxError):
            parse_field("orphan")


class TestRelations:
    """Relation attribute detection and classification."""

    def test_named_relation_field(self) -> None:
        author = parse_schema_text(BLOG_SCHEMA)[1].get_field("author")
        assert author.relation is not None
        assert author.relation.type is RelationType.ONE_TO_ONE
        assert author.relation.related_model == "User"
        assert author.relation.name == "UserPosts"

    def test_unnamed_relation_with_references(self) -> None:
        field = parse_field("author User @relation(fields: [authorId], references: [id])")
        assert field.relation.type is RelationType.MANY_TO_ONE
        assert field.relation.related_model == "User"

    def test_list_relation(self) -> None:
        field = parse_field('posts Post[] @relation("UserPosts")')
        assert field.relation.type is RelationType.MANY_TO_MANY
        assert field.relation.related_model == "Post"

    def test_optional_relation_related_model_has_no_marker(self) -> None:
        field = parse_field('editor User? @relation("Editor")')
        assert field.relation.related_model == "User"
        assert not field.is_required


class TestHelpers:
    def test_normalize_type(self) -> None:
        assert normalize_type("Int") == "Int"
        assert normalize_type("Int?") == "Int"
        assert normalize_type("Int[]") == "Int"

    def test_attribute_argument_absent(self) -> None:
        assert attribute_argument(["@unique"], "@default") is None

    def test_attribute_argument_without_parentheses(self) -> None:
        assert attribute_argument(["@default"], "@default") is None


class TestParseSchemaFile:
    """File reading and typed read failures."""

    def test_reads_file(self, tmp_path: Path) -> None:
        schema = tmp_path / "schema.prisma"
        schema.write_text(BLOG_SCHEMA, encoding="utf-8")
        assert [m.name for m in parse_schema(schema)] == ["User", "Post"]

    def test_missing_file_raises_schema_read_error(self, tmp_path: Path) -> None:
        with pytest.raises(SchemaReadError):
            parse_schema(tmp_path / "missing.prisma")

    def test_invalid_utf8_raises_schema_read_error(self, tmp_path: Path) -> None:
        schema = tmp_path / "schema.prisma"
        schema.write_bytes(b"model A {\n  x \xff\xfe\n}\n")
        with pytest.raises(SchemaReadError):
            parse_schema(schema)

    def test_parser_never_exits_process(self) -> None:
        """Read failures are raised, not turned into sys.exit()."""
        tree = ast.parse(PARSER_PATH.read_text())
        for node in ast.walk(tree):
            if isinstance(node, ast.Attribute) and node.attr == "exit":
                pytest.fail("parser.py calls exit()")
            if isinstance(node, ast.Name) and node.id == "exit":
                pytest.fail("parser.py calls exit()")
