"""
Named DSTU 4145 curve parameter sets.

The ten curves recommended by DSTU 4145-2002 (polynomial basis, one per
field degree 163 … 431) plus the worked example curve over GF(2^163)
from the standard's annex, whose base point and key pair reproduce the
published signing example.

Base points are stored uncompressed.  All curves have cofactor 2
(A = 1) or 4 (A = 0).

Usage
-----
::

    from dstu4145.params import CurveName, get_curve

    curve = get_curve(CurveName.DSTU_PB_257)
    same = get_curve(257)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from .curve import BinaryCurve
from .field import get_field


class CurveName(Enum):
    """Identifiers of the built-in parameter sets."""

    DSTU_PB_163 = "DSTU_PB_163"
    DSTU_PB_167 = "DSTU_PB_167"
    DSTU_PB_173 = "DSTU_PB_173"
    DSTU_PB_179 = "DSTU_PB_179"
    DSTU_PB_191 = "DSTU_PB_191"
    DSTU_PB_233 = "DSTU_PB_233"
    DSTU_PB_257 = "DSTU_PB_257"
    DSTU_PB_307 = "DSTU_PB_307"
    DSTU_PB_367 = "DSTU_PB_367"
    DSTU_PB_431 = "DSTU_PB_431"
    EXAMPLE_PB_163 = "EXAMPLE_PB_163"


@dataclass(frozen=True)
class _CurveParams:
    m: int
    a: int
    b: str
    order: str
    gx: str
    gy: str


# ── parameter table (hex, big-endian) ───────────────────────────────────
_PARAMS: Dict[CurveName, _CurveParams] = {
    CurveName.DSTU_PB_163: _CurveParams(
        m=163,
        a=1,
        b="5FF6108462A2DC8210AB403925E638A19C1455D21",
        order="400000000000000000002BEC12BE2262D39BCF14D",
        gx="2E2F85F5DD74CE983A5C4237229DAF8A3F35823BE",
        gy="3826F008A8C51D7B95284D9D03FF0E00CE2CD723A",
    ),
    CurveName.DSTU_PB_167: _CurveParams(
        m=167,
        a=1,
        b="6EE3CEEB230811759F20518A0930F1A4315A827DAC",
        order="3FFFFFFFFFFFFFFFFFFFFFB12EBCC7D7F29FF7701F",
        gx="7A1F6653786A68192803910A3D30B2A2018B21CD54",
        gy="5F49EB26781C0EC6B8909156D98ED435E45FD59918",
    ),
    CurveName.DSTU_PB_173: _CurveParams(
        m=173,
        a=0,
        b="108576C80499DB2FC16EDDF6853BBB278F6B6FB437D9",
        order="800000000000000000000189B4E67606E3825BB2831",
        gx="4D41A619BCC6EADF0448FA22FAD567A9181D37389CA",
        gy="10B51CC12849B234C75E6DD2028BF7FF5C1CE0D991A1",
    ),
    CurveName.DSTU_PB_179: _CurveParams(
        m=179,
        a=1,
        b="4A6E0856526436F2F88DD07A341E32D04184572BEB710",
        order="3FFFFFFFFFFFFFFFFFFFFFFB981960435FE5AB64236EF",
        gx="6BA06FE51464B2BD26DC57F48819BA9954667022C7D03",
        gy="4E5BAC864C497C7D43D45B5CA0631569C3EED64F0479D",
    ),
    CurveName.DSTU_PB_191: _CurveParams(
        m=191,
        a=1,
        b="7BC86E2102902EC4D5890E8B6B4981FF27E0482750FEFC03",
        order="40000000000000000000000069A779CAC1DABC6788F7474F",
        gx="714114B762F2FF4A7912A6D2AC58B9B5C2FCFE76DAEB7129",
        gy="58850AE1E985395D96F736FDBD832F4F54EF33FBD93079F3",
    ),
    CurveName.DSTU_PB_233: _CurveParams(
        m=233,
        a=1,
        b="6973B15095675534C7CF7E64A21BD54EF5DD3B8A0326AA936ECE454D2C",
        order="1000000000000000000000000000013E974E72F8A6922031D2603CFE0D7",
        gx="3FCDA526B6CDF83BA1118DF35B3C31761D3545F32728D003EEB25EFE96",
        gy="9CA8B57A934C54DEEDA9E54A7BBAD95E3B2E91C54D32BE0B9DF96D8D35",
    ),
    CurveName.DSTU_PB_257: _CurveParams(
        m=257,
        a=0,
        b=(
            "1CEF494720115657E18F938D7A7942394FF9425C1458C57861F9EEA6ADBE"
            "3BE10"
        ),
        order=(
            "800000000000000000000000000000006759213AF182E987D3E17714907D"
            "470D"
        ),
        gx=(
            "2A29EF207D0E9B6C55CD260B306C7E007AC491CA1B10C62334A9E8DCD8D2"
            "0FB7"
        ),
        gy=(
            "12CAF3B3F8A4A4F28CA01D0D3DECC4F029C45BD59B2C6CDB4BFD9C42D8E0"
            "A1B58"
        ),
    ),
    CurveName.DSTU_PB_307: _CurveParams(
        m=307,
        a=1,
        b=(
            "393C7F7D53666B5054B5E6C6D3DE94F4296C0C599E2E2E241050DF18B609"
            "0BDC90186904968BB"
        ),
        order=(
            "3FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC079C2F3825DA70D390FB"
            "BA588D4604022B7B7"
        ),
        gx=(
            "216EE8B189D291A0224984C1E92F1D16BF75CCD825A087A239B276D31677"
            "43C52C02D6E7232AA"
        ),
        gy=(
            "5D9306BACD22B7FAEB09D2E049C6E2866C5D1677762A8F2F2DC9A11C7F7B"
            "E8340AB2237C7F2A0"
        ),
    ),
    CurveName.DSTU_PB_367: _CurveParams(
        m=367,
        a=1,
        b=(
            "43FC8AD242B0B7A6F3D1627AD5654447556B47BF6AA4A64B0C2AFE42CADA"
            "B8F93D92394C79A79755437B56995136"
        ),
        order=(
            "40000000000000000000000000000000000000000000009C300B75A3FA82"
            "4F22428FD28CE8812245EF44049B2D49"
        ),
        gx=(
            "324A6EDDD512F08C49A99AE0D3F961197A76413E7BE81A400CA681E09639"
            "B5FE12E59A109F78BF4A373541B3B9A1"
        ),
        gy=(
            "33E137A78E568779D790C970D43E986EABD3268750EC2009CA10986455C7"
            "817FB811CEDDDEC2A04F2113059885B1"
        ),
    ),
    CurveName.DSTU_PB_431: _CurveParams(
        m=431,
        a=1,
        b=(
            "3CE10490F6A708FC26DFE8C3D27C4F94E690134D5BFF988D8D28AAEAEDE9"
            "75936C66BAC536B18AE2DC312CA493117DAA469C640CAF3"
        ),
        order=(
            "3FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFBA3175"
            "458009A8C0A724F02F81AA8A1FCBAF80D90C7A95110504CF"
        ),
        gx=(
            "1A62BA79D98133A16BBAE7ED9A8E03C32E0824D57AEF72F88986874E5AAE"
            "49C27BED49A2A95058068426C2171E99FD3B43C5947C857D"
        ),
        gy=(
            "70B5E1E14031C1F70BBEFE96BDDE66F451754B4CA5F48DA241F331AA396B"
            "8D1839A855C1769B1EA14BA53308B5E2723724E090E02DB9"
        ),
    ),
    CurveName.EXAMPLE_PB_163: _CurveParams(
        m=163,
        a=1,
        b="5FF6108462A2DC8210AB403925E638A19C1455D21",
        order="400000000000000000002BEC12BE2262D39BCF14D",
        gx="72D867F93A93AC27DF9FF01AFFE74885C8C540420",
        gy="224A9C3947852B97C5599D5F4AB81122ADC3FD9B",
    ),
}


def _build(name: CurveName, p: _CurveParams) -> BinaryCurve:
    gf = get_field(p.m)
    return BinaryCurve(
        field=gf,
        a=p.a,
        b=gf.from_hex(p.b),
        gx=gf.from_hex(p.gx),
        gy=gf.from_hex(p.gy),
        order=int(p.order, 16),
        name=name.value,
    )


CURVES: Dict[CurveName, BinaryCurve] = {
    name: _build(name, p) for name, p in _PARAMS.items()
}

STANDARD_DEGREES = (163, 167, 173, 179, 191, 233, 257, 307, 367, 431)


def get_curve(curve: Union[CurveName, str, int]) -> BinaryCurve:
    """
    Look up a built-in curve by ``CurveName``, by its string value
    (e.g. ``"DSTU_PB_233"``), or by field degree (the recommended
    curve of that degree).
    """
    if isinstance(curve, int):
        if curve not in STANDARD_DEGREES:
            raise ValueError(
                f"no standard curve of degree {curve}; "
                f"expected one of {STANDARD_DEGREES}"
            )
        return CURVES[CurveName(f"DSTU_PB_{curve}")]
    try:
        return CURVES[CurveName(curve)]
    except ValueError:
        raise ValueError(f"unknown curve {curve!r}") from None
