"""End-to-end tests: map files and static hints to a schema document."""

from pathlib import Path

from entschema.config.models import EntSchemaConfig, IngestConfig, MergeConfig, NamingConfig
from entschema.corpus.entities import Entity
from entschema.inference.types import SemanticType
from entschema.pipeline import build_index, expand_inputs, run_pipeline
from entschema.schema.emit import render_document
from entschema.sdk.models import EntityLink, InheritEdge, SourceHint
from entschema.sdk.scan import ScanResult


def _config(**sections) -> EntSchemaConfig:
    return EntSchemaConfig(ingest=IngestConfig(max_workers=2), **sections)


class TestExpandInputs:
    def test_directories_expand_to_sorted_map_files(self, tmp_path: Path) -> None:
        (tmp_path / "maps" / "sub").mkdir(parents=True)
        for name in ("maps/b.bsp", "maps/sub/a.BSP", "maps/readme.txt"):
            (tmp_path / name).write_text("{}")
        single = tmp_path / "extra.ent"
        single.write_text("{}")

        paths = expand_inputs([tmp_path / "maps", single], [".bsp"])

        assert paths == [tmp_path / "maps" / "b.bsp", tmp_path / "maps" / "sub" / "a.BSP", single]


class TestRunPipeline:
    def test_given_player_starts_when_run_then_angles_optional(self, write_map) -> None:
        # Given
        first = write_map(
            "a.bsp", {"classname": "info_player_start", "origin": "0 0 0", "angles": "0 90 0"}
        )
        second = write_map("b.bsp", {"classname": "info_player_start", "origin": "-64 0 0"})

        # When
        result = run_pipeline([first, second], _config())

        # Then
        (schema,) = result.document.classes
        assert schema.identifier == "InfoPlayerStart"
        angles = next(p for p in schema.properties if p.name == "angles")
        assert angles.type is SemanticType.ANGLES
        assert angles.optional

    def test_optionality_law_holds_for_every_property(self, write_map) -> None:
        maps = [
            write_map(
                f"m{i}.bsp",
                {"classname": "npc", "health": str(10 * i), **({"squad": "a"} if i % 2 else {})},
                {"classname": "item", "model": f"m{i}.mdl"},
            )
            for i in range(6)
        ]

        result = run_pipeline(maps, _config())

        for schema in result.document.classes:
            for prop in schema.properties:
                count = sum(
                    1
                    for path in maps
                    for block in path.read_text().split("}")
                    if f'"classname" "{schema.classname}"' in block and f'"{prop.key}"' in block
                )
                assert prop.optional == (count < schema.occurrences)

    def test_identical_corpus_renders_identically(self, write_map) -> None:
        maps = [
            write_map("a.bsp", {"classname": "light", "_light": "255 255 255 200", "style": "0"}),
            write_map("b.bsp", {"classname": "func_door", "speed": "100", "type": "2"}),
        ]

        first = render_document(run_pipeline(maps, _config()).document)
        second = render_document(run_pipeline(list(reversed(maps)), _config()).document)

        assert first == second

    def test_custom_decoder_and_report(self) -> None:
        def decoder(path: Path) -> list[Entity]:
            return [Entity((("classname", path.stem), ("targetname", "t")))]

        result = run_pipeline([Path("x.bsp"), Path("y.bsp")], _config(), decoder=decoder)

        assert [c.classname for c in result.document.classes] == ["x", "y"]
        assert result.report.files_decoded == 2
        assert all(c.reference_bearing for c in result.document.classes)

    def test_static_hints_apply_under_compatible_policy(self, write_map) -> None:
        scan = ScanResult(
            hints=[
                SourceHint(
                    class_name="CBaseToggle", property_name="speed", semantic_type=SemanticType.F32
                )
            ],
            inherits=[InheritEdge(class_name="CFuncDoor", bases=("CBaseToggle",))],
            links=[EntityLink(entity="func_door", class_name="CFuncDoor")],
        )
        door = write_map("a.bsp", {"classname": "func_door", "speed": "100"})

        advisory = run_pipeline([door], _config(), scan=scan)
        compatible = run_pipeline(
            [door], _config(merge=MergeConfig(hint_policy="compatible")), scan=scan
        )

        assert advisory.document.classes[0].properties[0].type is SemanticType.U8
        assert compatible.document.classes[0].properties[0].type is SemanticType.F32

    def test_python_grammar_renames(self, write_map) -> None:
        path = write_map("a.bsp", {"classname": "thing", "class": "x"})

        result = run_pipeline([path], _config(naming=NamingConfig(grammar="python")))

        (prop,) = result.document.classes[0].properties
        assert (prop.name, prop.rename_from) == ("class_", "class")


class TestBuildIndex:
    def test_no_scan_means_no_index(self) -> None:
        assert build_index(None, EntSchemaConfig()) is None

    def test_inheritance_mode_from_config(self) -> None:
        scan = ScanResult(
            inherits=[
                InheritEdge(class_name="A", bases=("B",)),
                InheritEdge(class_name="B", bases=("C",)),
            ]
        )
        config = EntSchemaConfig(merge=MergeConfig(inheritance="transitive"))

        index = build_index(scan, config)

        assert index is not None
        assert index.ancestors("A") == ["B", "C"]
