"""Pytest configuration and shared fixtures for cpm_1d tests."""

import pytest
import numpy as np

from cpm_1d.config.cell_config import CellConfig, QuadratureConfig
from cpm_1d.config.enums import QuadratureMode
from cpm_1d.core.materials import MGCrossSections
from cpm_1d.transport.cell import CylindricalCell


# Fixtures for materials


@pytest.fixture
def fuel():
    """One-group pure absorber (Etr = 0.5 /cm)."""
    return MGCrossSections(name="fuel", Etr=[0.5], Es_tr=[0.0])


@pytest.fixture
def moderator():
    """One-group pure absorber (Etr = 0.2 /cm)."""
    return MGCrossSections(name="moderator", Etr=[0.2], Es_tr=[0.0])


@pytest.fixture
def scattering_fuel():
    """Two-group fuel with down-scattering."""
    return MGCrossSections(
        name="scattering_fuel",
        Etr=[0.3, 0.9],
        Es_tr=[[0.10, 0.05], [0.0, 0.40]],
        Ea=[0.15, 0.5],
        Ef=[0.01, 0.2],
        nu=[2.5, 2.4],
        chi=[1.0, 0.0],
    )


@pytest.fixture
def scattering_moderator():
    """Two-group moderator with strong in-group scattering."""
    return MGCrossSections(
        name="scattering_moderator",
        Etr=[0.25, 1.2],
        Es_tr=[[0.15, 0.08], [0.0, 1.0]],
        Ea=[0.02, 0.2],
    )


# Fixtures for cells


@pytest.fixture
def two_region_radii():
    """Outer radii of the standard two-region test cell [cm]."""
    return [0.4, 0.6]


@pytest.fixture
def two_region_cell(two_region_radii, fuel, moderator):
    """Unsolved two-region pure-absorber cell."""
    return CylindricalCell(two_region_radii, [fuel, moderator])


@pytest.fixture
def scattering_cell(scattering_fuel, scattering_moderator):
    """Unsolved two-group cell with scattering in both regions."""
    return CylindricalCell([0.4, 0.63], [scattering_fuel, scattering_moderator])


@pytest.fixture
def adaptive_quadrature():
    """Default adaptive shell quadrature."""
    return QuadratureConfig()


@pytest.fixture
def fixed_quadrature():
    """Single GK21 evaluation per shell."""
    return QuadratureConfig(mode=QuadratureMode.FIXED)


@pytest.fixture
def default_config():
    """Default engine configuration."""
    return CellConfig()


# Tolerance fixtures


@pytest.fixture
def tolerance():
    """Default tolerance for floating point comparisons."""
    return 1e-6


@pytest.fixture
def rtol():
    """Relative tolerance for comparisons."""
    return 1e-6


@pytest.fixture
def atol():
    """Absolute tolerance for comparisons."""
    return 1e-10


# Reference solutions


def _bare_cylinder_blackness(sigma, radius):
    """Blackness of a bare homogeneous cylinder from its transmission.

    Gamma = 1 - (4 / (pi R)) * int_0^R Ki3(2 sigma sqrt(R^2 - y^2)) dy
    """
    from scipy.integrate import quad

    from cpm_1d.core.special_functions import Ki3

    integral, _ = quad(
        lambda y: Ki3(2.0 * sigma * np.sqrt(max(radius * radius - y * y, 0.0))),
        0.0,
        radius,
        epsabs=1e-13,
        epsrel=1e-11,
        limit=200,
    )
    return 1.0 - 4.0 * integral / (np.pi * radius)


@pytest.fixture
def bare_cylinder_blackness():
    """Reference blackness function (sigma, radius) -> Gamma."""
    return _bare_cylinder_blackness
