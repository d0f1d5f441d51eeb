"""Tests for multigroup materials and the material registry."""

import dataclasses
import warnings

import pytest
import numpy as np
import yaml
from numpy.testing import assert_allclose, assert_array_equal

from cpm_1d.core.exceptions import ConfigurationError
from cpm_1d.core.materials import MGCrossSections
from cpm_1d.materials import (
    LIBRARY_PATH,
    MaterialRegistry,
    get_global_registry,
    get_material,
    list_materials,
)


class TestMGCrossSections:
    """Tests for the MGCrossSections record."""

    def test_vector_scattering_is_in_group(self):
        mat = MGCrossSections(name="m", Etr=[0.5, 0.8], Es_tr=[0.1, 0.3])

        assert mat.Es_tr.shape == (2, 2)
        assert_array_equal(mat.Es_tr, [[0.1, 0.0], [0.0, 0.3]])
        assert_array_equal(mat.in_group_scatter, [0.1, 0.3])

    def test_matrix_scattering(self, scattering_fuel):
        assert scattering_fuel.ngroups == 2
        assert_array_equal(scattering_fuel.in_group_scatter, [0.10, 0.40])
        assert scattering_fuel.Es_tr[0, 1] == 0.05

    def test_default_removal(self, scattering_fuel):
        assert_allclose(scattering_fuel.Er_tr, [0.2, 0.5], rtol=1e-14)

    def test_explicit_removal(self):
        mat = MGCrossSections(name="m", Etr=[0.5], Es_tr=[0.1], Er_tr=[0.35])
        assert_array_equal(mat.Er_tr, [0.35])

    def test_scattering_ratio(self, scattering_moderator):
        assert_allclose(scattering_moderator.scattering_ratio, [0.6, 1.0 / 1.2], rtol=1e-14)

    def test_fissile(self, scattering_fuel, scattering_moderator, fuel):
        assert scattering_fuel.fissile
        assert not scattering_moderator.fissile
        assert not fuel.fissile

    def test_arrays_read_only(self, scattering_fuel):
        with pytest.raises(ValueError):
            scattering_fuel.Etr[0] = 1.0
        with pytest.raises(ValueError):
            scattering_fuel.Es_tr[0, 0] = 1.0
        with pytest.raises(ValueError):
            scattering_fuel.nu[0] = 1.0

    def test_frozen(self, fuel):
        with pytest.raises(dataclasses.FrozenInstanceError):
            fuel.name = "other"

    def test_input_copied(self):
        etr = np.array([0.5, 0.8])
        mat = MGCrossSections(name="m", Etr=etr, Es_tr=[0.0, 0.0])
        etr[0] = 10.0

        assert mat.Etr[0] == 0.5

    @pytest.mark.parametrize("etr", [[0.0, 1.0], [-0.5, 1.0], [np.nan, 1.0], [np.inf, 1.0]])
    def test_invalid_etr_rejected(self, etr):
        with pytest.raises(ConfigurationError, match="Etr"):
            MGCrossSections(name="bad", Etr=etr, Es_tr=[0.0, 0.0])

    def test_two_dimensional_etr_rejected(self):
        with pytest.raises(ConfigurationError, match="1D"):
            MGCrossSections(name="bad", Etr=[[0.5]], Es_tr=[0.0])

    def test_scattering_group_mismatch_rejected(self):
        with pytest.raises(ConfigurationError, match="Es_tr"):
            MGCrossSections(name="bad", Etr=[0.5, 0.8], Es_tr=[0.1])

    def test_scattering_matrix_shape_rejected(self):
        with pytest.raises(ConfigurationError, match="shape"):
            MGCrossSections(name="bad", Etr=[0.5, 0.8], Es_tr=[[0.1, 0.0, 0.0]])

    def test_negative_absorption_rejected(self):
        with pytest.raises(ConfigurationError, match="Ea"):
            MGCrossSections(name="bad", Etr=[0.5], Es_tr=[0.1], Ea=[-0.1])

    def test_optional_length_rejected(self):
        with pytest.raises(ConfigurationError, match="chi"):
            MGCrossSections(name="bad", Etr=[0.5, 0.8], Es_tr=[0.1, 0.2], chi=[1.0])

    def test_dict_round_trip(self, scattering_fuel):
        restored = MGCrossSections.from_dict(scattering_fuel.to_dict())

        assert restored.name == scattering_fuel.name
        assert_array_equal(restored.Etr, scattering_fuel.Etr)
        assert_array_equal(restored.Es_tr, scattering_fuel.Es_tr)
        assert_array_equal(restored.chi, scattering_fuel.chi)

    def test_to_dict_skips_missing_optionals(self, fuel):
        data = fuel.to_dict()

        assert "Ea" not in data
        assert data["Er_tr"] == [0.5]

    def test_from_dict_missing_key(self):
        with pytest.raises(ConfigurationError, match="Es_tr"):
            MGCrossSections.from_dict({"name": "m", "Etr": [0.5]})


class TestMaterialRegistry:
    """Tests for MaterialRegistry."""

    def test_register_and_get(self, fuel):
        registry = MaterialRegistry()
        registry.register_material(fuel)

        assert registry.get_material("fuel") is fuel
        assert "fuel" in registry
        assert len(registry) == 1
        assert registry.list_materials() == ["fuel"]

    def test_duplicate_warns(self, fuel):
        registry = MaterialRegistry()
        registry.register_material(fuel)

        with pytest.warns(UserWarning, match="already registered"):
            registry.register_material(fuel)

    def test_missing_material(self, fuel):
        registry = MaterialRegistry()
        registry.register_material(fuel)

        with pytest.raises(KeyError, match="not found"):
            registry.get_material("unobtainium")

    def test_yaml_round_trip(self, tmp_path, scattering_fuel, scattering_moderator):
        registry = MaterialRegistry()
        registry.register_material(scattering_fuel)
        registry.register_material(scattering_moderator)

        path = tmp_path / "nested" / "materials.yaml"
        registry.save_to_yaml(str(path))
        loaded = MaterialRegistry(str(path))

        assert loaded.list_materials() == ["scattering_fuel", "scattering_moderator"]
        assert_array_equal(
            loaded.get_material("scattering_fuel").Es_tr, scattering_fuel.Es_tr
        )
        assert_array_equal(
            loaded.get_material("scattering_moderator").Ea, scattering_moderator.Ea
        )

    def test_load_missing_file(self, tmp_path):
        registry = MaterialRegistry()

        with pytest.raises(FileNotFoundError):
            registry.load_from_yaml(str(tmp_path / "missing.yaml"))

    def test_load_without_materials_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"other": []}))

        with pytest.raises(ConfigurationError, match="materials"):
            MaterialRegistry(str(path))

    def test_load_invalid_material(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"materials": [{"name": "m", "Etr": [-1.0], "Es_tr": [0.0]}]}))

        with pytest.raises(ConfigurationError):
            MaterialRegistry(str(path))


class TestMaterialLibrary:
    """Tests for the packaged seven-group library."""

    def test_library_file_exists(self):
        assert LIBRARY_PATH.exists()

    def test_global_registry_cached(self):
        assert get_global_registry() is get_global_registry()

    def test_library_materials(self):
        names = list_materials()

        assert "UO2" in names
        assert "H2O" in names

    def test_seven_groups(self):
        assert get_material("UO2").ngroups == 7
        assert get_material("H2O").ngroups == 7

    def test_fuel_is_fissile(self):
        assert get_material("UO2").fissile
        assert not get_material("H2O").fissile

    def test_fission_spectrum_normalized(self):
        assert_allclose(get_material("UO2").chi.sum(), 1.0, rtol=1e-4)

    def test_removal_positive(self):
        """In-group scattering never exceeds the transport cross section."""
        for name in ("UO2", "H2O"):
            mat = get_material(name)
            assert np.all(mat.Er_tr > 0.0)
            assert np.all(mat.scattering_ratio < 1.0)

    def test_library_values(self):
        uo2 = get_material("UO2")
        h2o = get_material("H2O")

        assert_allclose(uo2.Etr[0], 1.77949e-01)
        assert_allclose(h2o.Etr[6], 2.65038)
        assert_allclose(h2o.Es_tr[0, 1], 1.13400e-01)

    def test_global_lookup_missing(self):
        with pytest.raises(KeyError):
            get_material("unobtainium")

    def test_loading_library_twice_warns(self):
        registry = MaterialRegistry(str(LIBRARY_PATH))

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            registry.load_from_yaml(str(LIBRARY_PATH))

        assert len(caught) == 2
        assert all(issubclass(w.category, UserWarning) for w in caught)
