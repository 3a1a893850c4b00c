"""Tests for sdkgen.generator.renderer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from sdkgen.compiler import compile_spec
from sdkgen.diagnostics import Diagnostics
from sdkgen.exceptions import ProjectionError, TemplateError
from sdkgen.generator.renderer import (
    _comment,
    _referenced_names,
    _uses_datetime,
    create_environment,
    render_target,
    write_target,
)
from sdkgen.models import (
    CompiledSpec,
    Field,
    FieldKind,
    FieldType,
    StructData,
    TargetConfig,
    TargetLanguage,
    Type,
)


@pytest.fixture
def minimal(minimal_raw: dict[str, Any]) -> CompiledSpec:
    return compile_spec(minimal_raw, diagnostics=Diagnostics(log=None))


@pytest.fixture
def billing(billing_raw: dict[str, Any]) -> CompiledSpec:
    return compile_spec(billing_raw, diagnostics=Diagnostics(log=None))


# ---------------------------------------------------------------------------
# Output layout
# ---------------------------------------------------------------------------


class TestLayout:
    @pytest.mark.parametrize("language, resource_file, type_file", [
        (TargetLanguage.CSHARP, "api/Foo.cs", "models/Foo.cs"),
        (TargetLanguage.GO, "api/foo.go", "models/foo.go"),
        (TargetLanguage.JAVASCRIPT, "api/foo.ts", "models/foo.ts"),
        (TargetLanguage.KOTLIN, "api/Foo.kt", "models/Foo.kt"),
        (TargetLanguage.RUST, "api/foo.rs", "models/foo.rs"),
    ])
    def test_every_language_renders_minimal(
        self, minimal: CompiledSpec, language: TargetLanguage, resource_file: str, type_file: str
    ) -> None:
        files = render_target(minimal, language)
        assert set(files) == {Path(resource_file), Path(type_file)}
        assert all("@generated" in text for text in files.values())
        assert "Foo" in files[Path(type_file)]

    def test_file_stems_follow_language_case(self, billing: CompiledSpec) -> None:
        files = render_target(billing, TargetLanguage.RUST)
        assert sorted(str(p) for p in files) == [
            "api/application.rs",
            "api/event_type.rs",
            "models/application_in.rs",
            "models/application_out.rs",
            "models/event_type_out.rs",
            "models/list_response_application_out.rs",
            "models/list_response_event_type_out.rs",
        ]


# ---------------------------------------------------------------------------
# Rendered content
# ---------------------------------------------------------------------------


class TestRustContent:
    def test_type(self, billing: CompiledSpec) -> None:
        text = render_target(billing, TargetLanguage.RUST)[Path("models/application_out.rs")]
        assert "pub struct ApplicationOut {" in text
        assert "pub created_at: DateTime<Utc>," in text
        assert '#[serde(rename = "createdAt")]' in text
        assert "pub metadata: Option<std::collections::HashMap<String, String>>," in text
        assert "pub tags: Option<Vec<String>>," in text

    def test_type_imports_referenced_types(self, billing: CompiledSpec) -> None:
        text = render_target(billing, TargetLanguage.RUST)[Path("models/list_response_application_out.rs")]
        assert "use super::{ ApplicationOut };" in text
        assert "pub data: Vec<ApplicationOut>," in text

    def test_field_description_becomes_doc_comment(self, billing: CompiledSpec) -> None:
        text = render_target(billing, TargetLanguage.RUST)[Path("models/application_in.rs")]
        assert "    /// Application name for human consumption." in text
        assert "pub rate_limit: Option<u16>," in text

    def test_resource(self, billing: CompiledSpec) -> None:
        text = render_target(billing, TargetLanguage.RUST)[Path("api/application.rs")]
        assert "pub struct ApplicationListOptions {" in text
        assert "pub limit: Option<i32>," in text
        assert "pub struct ApplicationCreateOptions {" in text
        assert "pub idempotency_key: Option<String>," in text
        assert "pub async fn delete(" in text
        assert "-> Result<()>" in text
        assert '.with_path_param("app_id", app_id)' in text
        assert "http1::Method::POST" in text


class TestOtherLanguages:
    def test_go_type_imports_time_only_when_needed(self, minimal: CompiledSpec) -> None:
        text = render_target(minimal, TargetLanguage.GO, package="acme")[Path("models/foo.go")]
        assert text.startswith("// Package acme is @generated\npackage acme\n")
        assert '"time"' not in text
        assert 'Name string `json:"name"`' in text

    def test_csharp_namespace_from_package(self, minimal: CompiledSpec) -> None:
        text = render_target(minimal, TargetLanguage.CSHARP, package="acme-billing")[Path("api/Foo.cs")]
        assert "namespace AcmeBilling" in text
        assert "public async Task<Foo> GetAsync(" in text

    def test_kotlin_resource(self, minimal: CompiledSpec) -> None:
        text = render_target(minimal, TargetLanguage.KOTLIN)[Path("api/Foo.kt")]
        assert "suspend fun get(" in text
        assert "id: String," in text

    def test_javascript_resource_imports_models(self, minimal: CompiledSpec) -> None:
        text = render_target(minimal, TargetLanguage.JAVASCRIPT)[Path("api/foo.ts")]
        assert 'import { type Foo, FooSerializer } from "../models/foo";' in text
        assert "): Promise<Foo> {" in text

    @pytest.mark.parametrize("language", [TargetLanguage.CSHARP, TargetLanguage.GO, TargetLanguage.KOTLIN])
    def test_unimplemented_projection_propagates(self, billing: CompiledSpec, language: TargetLanguage) -> None:
        with pytest.raises(ProjectionError):
            render_target(billing, language)


# ---------------------------------------------------------------------------
# Template overrides and errors
# ---------------------------------------------------------------------------


class TestTemplates:
    def test_override_replaces_one_template(self, minimal: CompiledSpec, tmp_path: Path) -> None:
        (tmp_path / "rust").mkdir()
        (tmp_path / "rust" / "type.j2").write_text("custom {{ type.name | snake_case }}\n")
        files = render_target(minimal, TargetLanguage.RUST, templates_dir=tmp_path)
        assert files[Path("models/foo.rs")] == "custom foo\n"
        assert "pub async fn get(" in files[Path("api/foo.rs")]

    def test_undefined_variable(self, minimal: CompiledSpec, tmp_path: Path) -> None:
        (tmp_path / "rust").mkdir()
        (tmp_path / "rust" / "type.j2").write_text("{{ nope }}\n")
        with pytest.raises(TemplateError, match="Failed to render 'type.j2'"):
            render_target(minimal, TargetLanguage.RUST, templates_dir=tmp_path)

    def test_syntax_error(self, minimal: CompiledSpec, tmp_path: Path) -> None:
        (tmp_path / "go").mkdir()
        (tmp_path / "go" / "resource.j2").write_text("{% for x in %}\n")
        with pytest.raises(TemplateError, match="Syntax error in template 'resource.j2'"):
            render_target(minimal, TargetLanguage.GO, templates_dir=tmp_path)

    def test_environment_filters(self) -> None:
        env = create_environment(TargetLanguage.RUST)
        template = env.from_string("{{ t | typename }} {{ 'event-type' | pascal_case }}")
        assert template.render(t=FieldType.list_of(FieldType.scalar(FieldKind.INT16))) == "Vec<i16> EventType"


# ---------------------------------------------------------------------------
# Hand-written api_extra snippets
# ---------------------------------------------------------------------------


GET_OR_CREATE_TS = """\
/** Get the application with the UID from `applicationIn`, or create it. {{ kept verbatim }} */
public getOrCreate(applicationIn: ApplicationIn): Promise<ApplicationOut> {
    const request = new ApiRequest(HttpMethod.POST, "/api/v1/app");
    request.setQueryParam("get_if_exists", true);
    return request.send(this.requestCtx, ApplicationOutSerializer._fromJsonObject);
}
"""


class TestApiExtra:
    def test_snippet_follows_its_operation(self, billing: CompiledSpec, tmp_path: Path) -> None:
        (tmp_path / "javascript" / "api_extra").mkdir(parents=True)
        (tmp_path / "javascript" / "api_extra" / "application_create.ts").write_text(GET_OR_CREATE_TS)
        files = render_target(billing, TargetLanguage.JAVASCRIPT, templates_dir=tmp_path)

        text = files[Path("api/application.ts")]
        assert "\n    public getOrCreate(applicationIn: ApplicationIn): Promise<ApplicationOut> {\n" in text
        assert "{{ kept verbatim }}" in text
        assert text.index("public create(") < text.index("public getOrCreate(") < text.index("public get(")
        assert "getOrCreate" not in files[Path("api/eventType.ts")]

    def test_snippet_names_use_snake_case(self, billing: CompiledSpec, tmp_path: Path) -> None:
        (tmp_path / "rust" / "api_extra").mkdir(parents=True)
        (tmp_path / "rust" / "api_extra" / "event_type_list.rs").write_text("pub fn extra() {}\n")
        text = render_target(billing, TargetLanguage.RUST, templates_dir=tmp_path)[Path("api/event_type.rs")]
        assert "\n    pub fn extra() {}\n}\n" in text

    def test_no_snippet_renders_nothing_extra(self, billing: CompiledSpec, tmp_path: Path) -> None:
        assert render_target(billing, TargetLanguage.RUST, templates_dir=tmp_path) == render_target(
            billing, TargetLanguage.RUST
        )

    def test_lookup_global(self, tmp_path: Path) -> None:
        (tmp_path / "go" / "api_extra").mkdir(parents=True)
        (tmp_path / "go" / "api_extra" / "app_get.go").write_text("func Extra() {}\n\n")
        env = create_environment(TargetLanguage.GO, templates_dir=tmp_path)
        assert env.globals["api_extra"]("app", "get") == "func Extra() {}"
        assert env.globals["api_extra"]("app", "list") == ""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_comment(self) -> None:
        assert _comment("first\n\nsecond  \n", "/// ") == "/// first\n///\n/// second"
        assert _comment(None, "// ") == ""

    def test_referenced_names_for_type_excludes_itself(self) -> None:
        node = Type(
            name="Node",
            data=StructData(fields=(
                Field(name="next", type=FieldType.schema_ref("Node")),
                Field(name="tags", type=FieldType.map_of(FieldType.schema_ref("Tag"))),
                Field(name="owners", type=FieldType.list_of(FieldType.schema_ref("Owner"))),
            )),
        )
        assert _referenced_names(node) == ["Owner", "Tag"]

    def test_referenced_names_for_operation(self, billing: CompiledSpec) -> None:
        ops = {op.id: op for op in billing.api.operations()}
        assert _referenced_names(ops["v1.application.create"]) == ["ApplicationIn", "ApplicationOut"]
        assert _referenced_names(ops["v1.application.delete"]) == []

    def test_uses_datetime_looks_inside_containers(self) -> None:
        nested = Type(
            name="T",
            data=StructData(fields=(
                Field(name="when", type=FieldType.list_of(FieldType.scalar(FieldKind.DATETIME))),
            )),
        )
        flat = Type(name="U", data=StructData(fields=(Field(name="a", type=FieldType.scalar(FieldKind.STRING)),)))
        assert _uses_datetime(nested) is True
        assert _uses_datetime(flat) is False


# ---------------------------------------------------------------------------
# write_target
# ---------------------------------------------------------------------------


class TestWriteTarget:
    def test_writes_sorted_files(self, minimal: CompiledSpec, tmp_path: Path) -> None:
        target = TargetConfig(language=TargetLanguage.RUST, output_dir=str(tmp_path / "out"))
        written = write_target(minimal, target)
        assert written == [tmp_path / "out" / "api" / "foo.rs", tmp_path / "out" / "models" / "foo.rs"]
        assert "pub struct Foo {" in (tmp_path / "out" / "models" / "foo.rs").read_text()
        assert not list((tmp_path / "out").rglob("*.tmp"))

    def test_overwrites_existing_files(self, minimal: CompiledSpec, tmp_path: Path) -> None:
        stale = tmp_path / "models" / "foo.rs"
        stale.parent.mkdir(parents=True)
        stale.write_text("stale")
        write_target(minimal, TargetConfig(language=TargetLanguage.RUST, output_dir=str(tmp_path)))
        assert stale.read_text() != "stale"

    def test_projection_error_writes_nothing(self, billing: CompiledSpec, tmp_path: Path) -> None:
        target = TargetConfig(language=TargetLanguage.CSHARP, output_dir=str(tmp_path / "out"))
        with pytest.raises(ProjectionError):
            write_target(billing, target)
        assert not (tmp_path / "out").exists()
