import math

import pytest

from mathmesh.config import EngineLimits
from mathmesh.errors import InvalidParameter
from mathmesh.request import (
    PARAMS_FOR_KIND,
    FieldParams,
    FractalParams,
    GeometryKind,
    GeometryRequest,
    HopfParams,
    JuliaParams,
    NCubeParams,
    SurfaceParams,
    TorusKnotParams,
    clamp_request,
)


class TestKindParsing:
    @pytest.mark.parametrize('name, kind', [
        ('klein_bottle', GeometryKind.KLEIN_BOTTLE),
        ('KLEIN_BOTTLE', GeometryKind.KLEIN_BOTTLE),
        ('kleinBottle', GeometryKind.KLEIN_BOTTLE),
        ('hopfEducational', GeometryKind.HOPF_BASE_SPHERE),
        ('fractal', GeometryKind.SIERPINSKI),
        ('7d', GeometryKind.NCUBE7),
        (' torus_knot ', GeometryKind.TORUS_KNOT),
    ])
    def test_aliases(self, name, kind):
        assert GeometryKind.parse(name) is kind

    def test_unknown(self):
        with pytest.raises(InvalidParameter):
            GeometryKind.parse('dodecahedron')
        with pytest.raises(InvalidParameter):
            GeometryKind.parse(7)

    def test_dimension(self):
        assert GeometryKind.NCUBE10.dimension == 10
        assert GeometryKind.TESSERACT.dimension == 4
        assert GeometryKind.MANDALA.dimension is None

    def test_bundle_kinds(self):
        bundles = {k for k in GeometryKind if k.returns_bundle}
        assert bundles == {GeometryKind.HOPF_TUBES, GeometryKind.HOPF_RIBBONS,
                           GeometryKind.HOPF_BASE_SPHERE}

    def test_every_kind_has_a_params_entry(self):
        assert set(PARAMS_FOR_KIND) == set(GeometryKind)


class TestRequest:
    def test_defaults(self):
        req = GeometryRequest(GeometryKind.KLEIN_BOTTLE)
        assert req.complexity == 5
        assert req.symmetry == 8
        assert req.radius == 1.0
        assert req.seed == 0
        assert req.params == SurfaceParams()

    def test_kind_from_string(self):
        assert GeometryRequest('juliaSet').kind is GeometryKind.JULIA_SET

    def test_seed_none_is_fixed(self):
        assert GeometryRequest('neuronal', seed=None).seed == 0

    @pytest.mark.parametrize('field, value', [
        ('complexity', 0),
        ('complexity', 2.5),
        ('complexity', True),
        ('symmetry', 1),
        ('radius', 0.0),
        ('radius', -1.0),
        ('radius', math.nan),
        ('seed', -1),
    ])
    def test_rejects(self, field, value):
        with pytest.raises(InvalidParameter):
            GeometryRequest('mandala', **{field: value})

    def test_params_must_match_kind(self):
        with pytest.raises(InvalidParameter):
            GeometryRequest('klein_bottle', params=HopfParams())
        with pytest.raises(InvalidParameter):
            GeometryRequest('mandala', params=SurfaceParams())

    def test_immutable(self):
        req = GeometryRequest('mandala')
        with pytest.raises(Exception):
            req.complexity = 3

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            GeometryRequest('mandala', radius=-2.0)


class TestCreate:
    def test_routes_keywords(self):
        req = GeometryRequest.create('hopfTubes', complexity=10, tube_radius=0.05)
        assert req.kind is GeometryKind.HOPF_TUBES
        assert req.params.tube_radius == 0.05

    def test_unknown_keyword(self):
        with pytest.raises(InvalidParameter):
            GeometryRequest.create('torus_knot', wobble=3)

    def test_keywords_for_kind_without_params(self):
        with pytest.raises(InvalidParameter):
            GeometryRequest.create('mandala', size=2.0)

    def test_params_and_keywords_conflict(self):
        with pytest.raises(InvalidParameter):
            GeometryRequest.create('julia_set', params=JuliaParams(), resolution=10)


class TestParams:
    def test_ncube_size(self):
        with pytest.raises(InvalidParameter):
            NCubeParams(size=0)

    def test_torus_knot(self):
        with pytest.raises(InvalidParameter):
            TorusKnotParams(p=0)

    def test_hopf(self):
        with pytest.raises(InvalidParameter):
            HopfParams(fiber_map='spiral')
        with pytest.raises(InvalidParameter):
            HopfParams(radial_segments=2)
        assert HopfParams(fiber_map='great_circle').fiber_map == 'great_circle'

    def test_julia_c(self):
        assert JuliaParams(c=[-1, 0]).c == (-1.0, 0.0)
        for bad in ((1.0,), (1.0, math.inf), 'ab', 3.0):
            with pytest.raises(InvalidParameter):
                JuliaParams(c=bad)

    def test_fractal_depth(self):
        with pytest.raises(InvalidParameter):
            FractalParams(depth=-1)

    def test_field_layers(self):
        with pytest.raises(InvalidParameter):
            FieldParams(layers=4)


class TestClamp:
    limits = EngineLimits()

    def test_hopf_fibers(self):
        req = clamp_request(GeometryRequest('hopf_tubes', complexity=90), self.limits)
        assert req.complexity == 50
        req = clamp_request(GeometryRequest('hopf_ribbons', complexity=90), self.limits)
        assert req.complexity == 40
        req = clamp_request(GeometryRequest('hopf_base_sphere', complexity=90), self.limits)
        assert req.complexity == 40

    def test_tube_samples(self):
        req = GeometryRequest('hopf_tubes', params=HopfParams(points_per_fiber=500))
        assert clamp_request(req, self.limits).params.points_per_fiber == 120

    def test_fractal_depth_from_complexity(self):
        req = clamp_request(GeometryRequest('sierpinski', complexity=9), self.limits)
        assert req.params.depth == 4
        req = clamp_request(GeometryRequest('koch_snowflake', complexity=9), self.limits)
        assert req.params.depth == 5
        # complexity itself still drives spike counts
        assert req.complexity == 9

    def test_julia(self):
        req = GeometryRequest('julia_set', complexity=900, params=JuliaParams(resolution=100))
        clamped = clamp_request(req, self.limits)
        assert clamped.complexity == 500
        assert clamped.params.resolution == 60
        # input request untouched
        assert req.params.resolution == 100

    def test_untouched_request_is_returned(self):
        req = GeometryRequest('klein_bottle', complexity=3)
        assert clamp_request(req, self.limits) is req
