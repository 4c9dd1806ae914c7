"""케이스 테이블 및 삼각형 생성 규칙 테스트."""

import itertools

import numpy as np
import pytest

from tetramesh.core.cases import CASE_TABLE, EDGES, classify, inside_pattern, mask_to_str
from tetramesh.core.geometry import DegenerateEdgeError
from tetramesh.core.tetrahedra import Tetrahedron
from tetramesh.core.triangulate import TRIANGLE_RECIPES, edge_points, triangulate

# (p0, p1, p2, p3) 내부 여부 → 마스크 (p0p1, p0p2, p0p3, p1p2, p2p3, p3p1)
EXPECTED_TABLE = {
    "FFFF": "000000", "FFFT": "001011", "FFTF": "010110", "FFTT": "011101",
    "FTFF": "100101", "FTFT": "101110", "FTTF": "110011", "FTTT": "111000",
    "TFFF": "111000", "TFFT": "110011", "TFTF": "101110", "TFTT": "100101",
    "TTFF": "011101", "TTFT": "010110", "TTTF": "001011", "TTTT": "000000",
}

EXPECTED_TRIANGLES = {
    "000000": 0, "001011": 1, "010110": 1, "011101": 2,
    "100101": 1, "101110": 2, "110011": 2, "111000": 1,
}

UNIT_TET = np.array([
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [0.0, 0.0, 1.0],
])


def _densities(flags: str, inside: float = 0.0, outside: float = 10.0):
    """'TFFT' → [inside, outside, outside, inside]."""
    return [inside if c == "T" else outside for c in flags]


def _tet(flags: str) -> Tetrahedron:
    return Tetrahedron(vertices=UNIT_TET.copy(), densities=np.array(_densities(flags)))


class TestCaseTable:
    """16개 내부/외부 조합 → 교차 마스크."""

    @pytest.mark.parametrize("flags,mask", sorted(EXPECTED_TABLE.items()))
    def test_table_matches(self, flags, mask):
        """모든 조합이 표와 정확히 일치."""
        result = classify(_densities(flags), isovalue=5.0)
        assert mask_to_str(result) == mask

    def test_complement_symmetry(self):
        """비트를 모두 뒤집은 패턴은 같은 마스크."""
        for i in range(16):
            assert CASE_TABLE[i] == CASE_TABLE[15 - i]

    def test_table_is_total(self):
        """16개 항목, 각 마스크 6비트."""
        assert len(CASE_TABLE) == 16
        assert all(len(m) == 6 for m in CASE_TABLE)

    def test_pattern_bit_order(self):
        """p0가 최상위 비트."""
        assert inside_pattern([0, 10, 10, 10], 5) == 0b1000
        assert inside_pattern([10, 10, 10, 0], 5) == 0b0001

    def test_equal_to_isovalue_is_outside(self):
        """density == isovalue는 외부 (density < isovalue 만 내부)."""
        assert inside_pattern([5, 5, 5, 5], 5) == 0
        assert classify([5, 5, 5, 5], 5) == (0, 0, 0, 0, 0, 0)

    def test_wrong_arity(self):
        with pytest.raises(ValueError):
            classify([1, 2, 3], 0.5)

    def test_crossing_edges_join_opposite_corners(self):
        """마스크 플래그 = 양 끝점의 내부 여부가 다른 모서리."""
        for flags in itertools.product([True, False], repeat=4):
            dens = [0.0 if f else 10.0 for f in flags]
            mask = classify(dens, 5.0)
            for bit, (_, i, j) in zip(mask, EDGES):
                assert bit == int(flags[i] != flags[j])


class TestTriangleRecipes:
    """마스크별 삼각형 생성 규칙."""

    def test_recipes_cover_table_range(self):
        """표에 나오는 마스크는 모두 규칙이 있고, 그 외는 없음."""
        assert set(TRIANGLE_RECIPES) == set(CASE_TABLE)
        assert len(TRIANGLE_RECIPES) == 8

    @pytest.mark.parametrize("flags", sorted(EXPECTED_TABLE))
    def test_triangle_count(self, flags):
        """마스크별 삼각형 수 {0,1,1,2,1,2,2,1}."""
        out = []
        n = triangulate(_tet(flags), 5.0, out)
        assert n == EXPECTED_TRIANGLES[EXPECTED_TABLE[flags]]
        assert len(out) == n

    def test_recipe_uses_only_crossing_edges(self):
        """규칙의 모서리는 모두 마스크에서 교차로 표시된 모서리."""
        names = [e[0] for e in EDGES]
        for mask, recipe in TRIANGLE_RECIPES.items():
            crossing = {n for n, bit in zip(names, mask) if bit}
            used = {n for tri in recipe for n in tri}
            assert used == crossing

    def test_single_inside_corner(self):
        """p0만 내부 → (p01, p02, p03) 중점."""
        out = []
        triangulate(_tet("TFFF"), 5.0, out)
        verts = out[0].as_array()
        np.testing.assert_allclose(verts, [[0.5, 0, 0], [0, 0.5, 0], [0, 0, 0.5]])

    def test_appends_to_existing_output(self):
        """출력 시퀀스에 누적 (복사본이 아님)."""
        out = []
        triangulate(_tet("TFFF"), 5.0, out)
        triangulate(_tet("TTFF"), 5.0, out)
        assert len(out) == 3

    def test_complement_gives_same_vertices(self):
        """보수 패턴은 같은 정점 순서의 삼각형 (방향 구분 없음)."""
        a, b = [], []
        triangulate(_tet("TFFT"), 5.0, a)
        # 보수 패턴: 내부/외부 밀도를 뒤바꿔 같은 교차점이 나오도록 구성
        comp = Tetrahedron(vertices=UNIT_TET.copy(),
                           densities=np.array([10.0, 0.0, 0.0, 10.0]))
        triangulate(comp, 5.0, b)
        assert len(a) == len(b) == 2
        for ta, tb in zip(a, b):
            np.testing.assert_allclose(ta.as_array(), tb.as_array())


class TestEdgePoints:
    """모서리 보간점 계산."""

    def test_all_six_edges(self):
        tet = Tetrahedron(vertices=UNIT_TET.copy(), densities=np.array([0.0, 10.0, 4.0, 2.0]))
        points = edge_points(tet, 5.0)
        assert set(points) == {"p01", "p02", "p03", "p12", "p23", "p31"}
        np.testing.assert_allclose(points["p01"], [0.5, 0, 0])

    def test_degenerate_edge_is_none(self):
        """같은 밀도의 모서리는 None (0 나눗셈 없음)."""
        tet = Tetrahedron(vertices=UNIT_TET.copy(), densities=np.array([0.0, 0.0, 10.0, 10.0]))
        points = edge_points(tet, 5.0)
        assert points["p01"] is None
        assert points["p23"] is None
        assert points["p02"] is not None

    def test_orient_points_away_from_inside(self):
        """orient=True면 법선이 내부 꼭짓점 반대쪽을 향함."""
        for flags in EXPECTED_TABLE:
            if flags in ("FFFF", "TTTT"):
                continue
            tet = _tet(flags)
            out = []
            triangulate(tet, 5.0, out, orient=True)
            inside = np.array([c == "T" for c in flags])
            direction = UNIT_TET[~inside].mean(axis=0) - UNIT_TET[inside].mean(axis=0)
            for tri in out:
                assert np.dot(tri.normal(), direction) > 0

    def test_forced_mask_on_degenerate_edge_raises(self):
        """교차로 표시된 모서리가 퇴화하면 마스크 문자열과 함께 예외."""
        tet = Tetrahedron(vertices=UNIT_TET.copy(), densities=np.array([0.0, 0.0, 10.0, 10.0]))
        with pytest.raises(DegenerateEdgeError, match="p01 of mask 111000"):
            triangulate(tet, 5.0, [], mask=(1, 1, 1, 0, 0, 0))
