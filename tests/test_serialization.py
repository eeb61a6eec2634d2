"""Tests for model document export/import."""
import json

import pytest

from analysis import FailureKind, FPAnalysis, ProcessType, load_model, save_model


class TestExportModel:

    def test_document_layout(self, seeded_store):
        doc = seeded_store.export_model()
        assert set(doc) == {"logicalFiles", "elementaryProcesses"}

        ret = next(lf for lf in doc["logicalFiles"] if lf["name"] == "Categoria_Traducao")
        assert ret == {
            "name": "Categoria_Traducao",
            "type": "RET",
            "parentName": "Categoria",
            "dataElements": [{"name": "idioma", "dtype": "TEXT"}, {"name": "nome", "dtype": "TEXT"}],
            "description": "",
        }
        ep = doc["elementaryProcesses"][0]
        assert ep["id"] == "EI_1"
        assert ep["type"] == "EI"
        assert ep["dataElements"][0] == {"name": "id", "logicalFileName": "Categoria"}
        assert "functionPoints" not in ep

    def test_scores_are_exported_after_evaluate(self, seeded_store):
        seeded_store.evaluate()
        doc = seeded_store.export_model()
        assert doc["logicalFiles"][0]["functionPoints"] == 7
        assert "functionPoints" not in doc["logicalFiles"][-1]  # the RET

    def test_export_is_a_deep_copy(self, seeded_store):
        doc = seeded_store.export_model()
        doc["logicalFiles"][0]["dataElements"].clear()
        doc["elementaryProcesses"].clear()
        assert seeded_store.get_logical_files()[0].data_elements
        assert len(seeded_store.get_elementary_processes()) == 2

    def test_document_is_json_serialisable(self, seeded_store):
        seeded_store.evaluate()
        assert json.loads(json.dumps(seeded_store.export_model())) == seeded_store.export_model()


class TestImportModel:

    def test_round_trip(self, seeded_store):
        doc = seeded_store.export_model()

        restored = FPAnalysis()
        assert restored.import_model(doc)
        assert restored.export_model() == doc
        assert restored.evaluate() == seeded_store.evaluate()
        assert restored.export_model() == seeded_store.export_model()
        assert restored.get_total_function_points() == seeded_store.get_total_function_points()

    def test_imported_scores_are_discarded(self, seeded_store):
        seeded_store.evaluate()
        doc = seeded_store.export_model()
        doc["logicalFiles"][0]["functionPoints"] = 999

        restored = FPAnalysis()
        assert restored.import_model(doc)
        assert restored.get_total_function_points() == 0
        assert "functionPoints" not in restored.export_model()["logicalFiles"][0]
        restored.evaluate()
        assert restored.get_total_function_points() == 35

    def test_missing_keys_default_to_empty(self, seeded_store):
        assert seeded_store.import_model({})
        assert seeded_store.get_logical_files() == []
        assert seeded_store.get_elementary_processes() == []

        assert seeded_store.import_model({"logicalFiles": [{"name": "Only"}]})
        [lf] = seeded_store.get_logical_files()
        assert lf.name == "Only"
        assert lf.data_elements == []

    def test_malformed_document_is_rejected(self, seeded_store):
        before = seeded_store.export_model()
        outcome = seeded_store.import_model({"logicalFiles": [{"type": "ILF"}]})
        assert outcome.kind == FailureKind.MALFORMED_INPUT
        assert seeded_store.import_model({"elementaryProcesses": "nope"}).kind == FailureKind.MALFORMED_INPUT
        assert seeded_store.import_model(["not", "a", "dict"]).kind == FailureKind.MALFORMED_INPUT
        assert seeded_store.export_model() == before

    def test_import_replaces_collections_wholesale(self, seeded_store, store):
        store.add_logical_file("Solo")
        assert store.import_model(seeded_store.export_model())
        assert "Solo" not in [lf.name for lf in store.get_logical_files()]

    def test_sequences_resume_after_import(self, store):
        doc = {"elementaryProcesses": [
            {"id": "EI_1", "description": "a", "type": "EI"},
            {"id": "EI_4", "description": "b", "type": "EI"},
            {"id": "EQ_2", "description": "c", "type": "EQ"},
        ]}
        assert store.import_model(doc)
        assert store.add_elementary_process("d", ProcessType.EI).value == "EI_5"
        assert store.add_elementary_process("e", ProcessType.EQ).value == "EQ_3"
        assert store.add_elementary_process("f", ProcessType.EO).value == "EO_1"


class TestFilePersistence:

    def test_save_and_load(self, seeded_store, tmp_path):
        seeded_store.evaluate()
        path = save_model(seeded_store, tmp_path / "nested" / "model.json")
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == seeded_store.export_model()

        restored = load_model(path)
        assert restored.evaluate() == seeded_store.evaluate()
        assert restored.export_model() == seeded_store.export_model()

    def test_load_into_existing_store(self, seeded_store, store, tmp_path):
        path = save_model(seeded_store, tmp_path / "model.json")
        assert load_model(path, store) is store
        assert len(store.get_elementary_processes()) == 2

    def test_load_malformed_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"logicalFiles": [{"dataElements": 3}]}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_model(path)

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_model(path)
