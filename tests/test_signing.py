"""
Tests for the signature protocol: the published example, sign / verify
round trips on every curve, negative controls and encodings.
"""

import hashlib
import logging

import pytest

from dstu4145 import (
    CurveName,
    InvalidLengthEncodingError,
    InvalidParamLengthError,
    InvalidParamsError,
    NumericParseError,
    PointAtInfinityError,
    PublicKeyValidationError,
    SamplingLimitError,
    Signature,
    SignatureMismatchError,
    SigningKey,
    VerifyingKey,
    check_l_d,
    generate_presign,
    get_curve,
    hash_to_field,
    sign,
    truncate_to_order,
    verify,
)
from dstu4145.hash import digest_bytes

from conftest import fixed_rng, seeded_rng

# Signing example over the GF(2^163) example curve
EXAMPLE_D = "0183F60FDF7951FF47D67193F8D073790C1C9B5A3E"
EXAMPLE_QX = "57DE7FDE023FF929CB6AC785CE4B79CF64ABDC2DA"
EXAMPLE_QY = "3E85444324BCF06AD85ABF6AD7B5F34770532B9AA"
EXAMPLE_DIGEST = bytes.fromhex("003A2EB95B7180166DDF73532EEB76EDAEF52247FF")
EXAMPLE_H = 0x03A2EB95B7180166DDF73532EEB76EDAEF52247FF
EXAMPLE_E = bytes.fromhex("01025E40BD97DB012B7A1D79DE8E12932D247F61C6")
EXAMPLE_FX = 0x042A7D756D70E1C9BA62D2CB43707C35204EF3C67C
EXAMPLE_R = 0x0274EA2C0CAA014A0D80A424F59ADE7A93068D08A7
EXAMPLE_S = 0x02100D86957331832B8E8C230F5BD6A332B3615ACA


def zero_rng(n: int) -> bytes:
    return bytes(n)


# ── published example ───────────────────────────────────────────────────
def test_example_step_by_step(example_curve):
    curve = example_curve
    assert curve.gx.value == 0x072D867F93A93AC27DF9FF01AFFE74885C8C540420

    d = int(EXAMPLE_D, 16)
    q = -(curve.base_point * d)
    assert q == curve.point(int(EXAMPLE_QX, 16), int(EXAMPLE_QY, 16))

    h = hash_to_field(EXAMPLE_DIGEST, curve.field)
    assert h.value == EXAMPLE_H

    e = int.from_bytes(EXAMPLE_E, "big")
    f = curve.base_point * e
    assert f.x.value == EXAMPLE_FX

    r = truncate_to_order(h * f.x, curve.order)
    assert r == EXAMPLE_R
    assert (e + d * r) % curve.order == EXAMPLE_S


def test_example_end_to_end(example_curve):
    sk = SigningKey.from_secret(example_curve, bytes.fromhex(EXAMPLE_D))
    sig = sk.sign_digest(EXAMPLE_DIGEST, rng=fixed_rng(EXAMPLE_E))
    assert sig.r_value == EXAMPLE_R
    assert sig.s_value == EXAMPLE_S
    assert sig.l_d == 336
    sk.verifying_key().verify_digest(EXAMPLE_DIGEST, sig)


def test_example_presign(example_curve):
    e, x_f = generate_presign(example_curve, fixed_rng(EXAMPLE_E))
    assert e == int.from_bytes(EXAMPLE_E, "big")
    assert x_f.value == EXAMPLE_FX


def test_example_verify_with_raw_values(example_curve):
    q = example_curve.point(int(EXAMPLE_QX, 16), int(EXAMPLE_QY, 16))
    verify(example_curve, EXAMPLE_DIGEST, q, EXAMPLE_R, EXAMPLE_S, 336)
    with pytest.raises(SignatureMismatchError):
        verify(example_curve, EXAMPLE_DIGEST, q, EXAMPLE_R, EXAMPLE_S ^ 1, 336)


# ── round trips ─────────────────────────────────────────────────────────
@pytest.mark.parametrize("name", list(CurveName), ids=lambda n: n.value)
def test_sign_verify_every_curve(name):
    curve = get_curve(name)
    rng = seeded_rng(curve.m)
    sk, vk = SigningKey.generate(curve, rng=rng)
    message = f"message for {name.value}".encode()
    sig = sk.sign(message, rng=rng)
    assert len(sig.to_bytes()) == curve.default_l_d // 8
    vk.verify(message, sig)


@pytest.mark.parametrize("message", [b"", b"hello", bytes(range(256)) * 4])
def test_sign_verify_messages(curve_163, message, rng):
    sk, vk = SigningKey.generate(curve_163, rng=rng)
    vk.verify(message, sk.sign(message, rng=rng))


def test_sign_with_system_randomness(curve_163):
    sk, vk = SigningKey.generate(curve_163)
    sig = sk.sign(b"fresh entropy")
    vk.verify(b"fresh entropy", sig)
    assert sk.sign(b"fresh entropy") != sig


def test_sign_verify_with_larger_l_d(curve_163, rng):
    sk, vk = SigningKey.generate(curve_163, l_d=512, rng=rng)
    sig = sk.sign(b"wide", rng=rng)
    assert len(sig.r) == len(sig.s) == 32
    vk.verify(b"wide", sig)


def test_hash_object_and_algorithm_choice(curve_163, rng):
    sk, vk = SigningKey.generate(curve_163, rng=rng)
    sig = sk.sign_digest(hashlib.sha3_512(b"payload"), rng=rng)
    vk.verify(b"payload", sig)

    sig = sk.sign(b"payload", rng=rng, algorithm="sha256")
    vk.verify(b"payload", sig, algorithm="sha256")
    with pytest.raises(SignatureMismatchError):
        vk.verify(b"payload", sig)


def test_digest_bytes_rejects_other_types():
    assert digest_bytes(bytearray(b"ab")) == b"ab"
    with pytest.raises(TypeError):
        digest_bytes(12345)


# ── negative controls ───────────────────────────────────────────────────
def test_wrong_key_is_a_mismatch(curve_163, rng):
    sk, _ = SigningKey.generate(curve_163, rng=rng)
    _, other_vk = SigningKey.generate(curve_163, rng=rng)
    sig = sk.sign(b"hello", rng=rng)
    with pytest.raises(SignatureMismatchError):
        other_vk.verify(b"hello", sig)


def test_tampered_signature_is_a_mismatch(curve_163, rng):
    sk, vk = SigningKey.generate(curve_163, rng=rng)
    sig = sk.sign(b"hello", rng=rng)
    n = curve_163.order

    bad_r = Signature.from_values(sig.r_value ^ 1, sig.s_value, sig.l_d)
    with pytest.raises(SignatureMismatchError):
        vk.verify(b"hello", bad_r)

    bad_s = Signature.from_values(sig.r_value, (sig.s_value + 1) % n, sig.l_d)
    with pytest.raises(SignatureMismatchError):
        vk.verify(b"hello", bad_s)

    with pytest.raises(SignatureMismatchError):
        vk.verify(b"hellO", sig)


def test_out_of_range_components(curve_163, rng):
    sk, vk = SigningKey.generate(curve_163, rng=rng)
    sig = sk.sign(b"hello", rng=rng)
    n = curve_163.order
    with pytest.raises(InvalidParamsError):
        vk.verify(b"hello", Signature.from_values(n, sig.s_value, sig.l_d))
    with pytest.raises(InvalidParamsError):
        vk.verify(b"hello", Signature.from_values(sig.r_value, n + 5, sig.l_d))


def test_identity_during_verification(curve_163):
    n = curve_163.order
    k = 987654321
    q = curve_163.base_point * k
    with pytest.raises(PointAtInfinityError):
        verify(curve_163, b"\x01" * 32, q, 1, n - k, curve_163.default_l_d)


def test_l_d_mismatch_between_signature_and_key(curve_163, rng):
    sk, _ = SigningKey.generate(curve_163, rng=rng)
    sig = sk.sign(b"hello", rng=rng)
    wide_vk = VerifyingKey(curve_163, sk.verifying_key().point, 512)
    with pytest.raises(InvalidParamsError):
        wide_vk.verify(b"hello", sig)


# ── parameters ──────────────────────────────────────────────────────────
def test_check_l_d(curve_163):
    with pytest.raises(InvalidParamsError):
        check_l_d(100, curve_163)
    with pytest.raises(InvalidParamsError):
        check_l_d(2 * curve_163.order_bits - 16, curve_163)
    check_l_d(curve_163.default_l_d, curve_163)


@pytest.mark.parametrize("name", list(CurveName), ids=lambda n: n.value)
def test_check_l_d_accepts_2048(name):
    check_l_d(2048, get_curve(name))


def test_sign_rejects_bad_inputs(curve_163):
    with pytest.raises(InvalidParamsError):
        sign(curve_163, b"x", 0, 336)
    with pytest.raises(InvalidParamsError):
        sign(curve_163, b"x", curve_163.order, 336)
    with pytest.raises(InvalidParamsError):
        sign(curve_163, b"x", 5, 330)


def test_truncation_width_follows_order(curve_163):
    assert truncate_to_order((1 << 200) - 1, curve_163.order) == (1 << 162) - 1
    assert truncate_to_order(1 << 162, curve_163.order) == 0


# ── sampling limits ─────────────────────────────────────────────────────
def test_presign_gives_up_on_degenerate_rng(curve_163, caplog):
    with caplog.at_level(logging.DEBUG, logger="dstu4145.signing"):
        with pytest.raises(SamplingLimitError):
            generate_presign(curve_163, zero_rng)
    assert "presign rejected" in caplog.text


def test_generate_gives_up_on_degenerate_rng(curve_163):
    with pytest.raises(SamplingLimitError):
        SigningKey.generate(curve_163, rng=zero_rng)


# ── keys ────────────────────────────────────────────────────────────────
def test_from_secret(example_curve):
    sk = SigningKey.from_secret(example_curve, bytes.fromhex(EXAMPLE_D))
    assert sk.to_bytes() == bytes.fromhex(EXAMPLE_D)
    assert sk.l_d == example_curve.default_l_d
    assert "<secret>" in repr(sk)

    too_wide = (1 << 162).to_bytes(21, "big")
    with pytest.raises(InvalidParamLengthError) as exc:
        SigningKey.from_secret(example_curve, too_wide)
    assert exc.value.desired == 162
    assert exc.value.actual == 163

    with pytest.raises(InvalidParamsError):
        SigningKey.from_secret(example_curve, bytes(21))
    with pytest.raises(InvalidParamsError):
        SigningKey.from_secret(example_curve, b"\x01", l_d=100)


def test_key_consistency(curve_163, example_curve, rng):
    sk, vk = SigningKey.generate(curve_163, rng=rng)
    sk.verify_verifying_key(vk)

    _, other = SigningKey.generate(curve_163, rng=rng)
    with pytest.raises(InvalidParamsError):
        sk.verify_verifying_key(other)

    with pytest.raises(InvalidParamsError):
        sk.verify_verifying_key(VerifyingKey(curve_163, vk.point, 512))

    # same field and order, different base point
    foreign = SigningKey.from_secret(
        example_curve, bytes.fromhex(EXAMPLE_D)
    ).verifying_key()
    with pytest.raises(InvalidParamsError):
        sk.verify_verifying_key(foreign)


def test_verifying_key_rejects_point_of_other_curve(curve_163, example_curve):
    with pytest.raises(InvalidParamsError):
        VerifyingKey(curve_163, example_curve.base_point, 336)


def test_verifying_key_encoding(curve_163, rng):
    _, vk = SigningKey.generate(curve_163, rng=rng)
    data = vk.to_bytes()
    assert len(data) == curve_163.field.byte_length
    assert VerifyingKey.from_bytes(curve_163, data) == vk
    assert VerifyingKey.from_hex(curve_163, vk.to_hex()) == vk
    assert VerifyingKey.from_bytes(curve_163, data, 512) != vk


def test_verifying_key_decoding_errors(curve_163):
    with pytest.raises(InvalidParamLengthError):
        VerifyingKey.from_bytes(curve_163, b"\xff" * 21)
    with pytest.raises(PublicKeyValidationError) as exc:
        VerifyingKey.from_bytes(curve_163, bytes(21))
    assert exc.value.reason == "wrong_order"
    with pytest.raises(NumericParseError):
        VerifyingKey.from_hex(curve_163, "xyz")


# ── signature encoding ──────────────────────────────────────────────────
def test_signature_packing_order(example_curve):
    sig = Signature.from_values(EXAMPLE_R, EXAMPLE_S, 336)
    packed = sig.to_bytes()
    assert len(packed) == 42
    assert packed[:21] == EXAMPLE_S.to_bytes(21, "big")
    assert packed[21:] == EXAMPLE_R.to_bytes(21, "big")
    assert Signature.from_bytes(packed) == sig
    assert Signature.from_hex(sig.to_hex()) == sig
    assert Signature.from_hex(sig.to_hex().lower()) == sig


def test_signature_components_are_zero_padded():
    sig = Signature.from_values(1, 2, 336)
    assert sig.r == b"\x00" * 20 + b"\x01"
    assert sig.s == b"\x00" * 20 + b"\x02"


def test_signature_decoding_errors():
    with pytest.raises(InvalidLengthEncodingError):
        Signature.from_bytes(b"")
    with pytest.raises(InvalidLengthEncodingError):
        Signature.from_bytes(b"\x00" * 41)
    with pytest.raises(InvalidLengthEncodingError):
        Signature.from_hex("ABCDEF")
    with pytest.raises(NumericParseError):
        Signature.from_hex("ZZZZ")
    with pytest.raises(InvalidLengthEncodingError):
        Signature(b"\x01", b"\x02\x03", 16)
    with pytest.raises(InvalidParamsError):
        Signature.from_values(1 << 200, 1, 336)


def test_hex_decoders_take_plain_digits_only(curve_163, rng):
    _, vk = SigningKey.generate(curve_163, rng=rng)
    text = vk.to_hex()
    for bad in ("0x" + text, text[:8] + "_" + text[8:], " " + text, text + "\n"):
        with pytest.raises(NumericParseError):
            VerifyingKey.from_hex(curve_163, bad)
    assert VerifyingKey.from_hex(curve_163, text.lower()) == vk

    sig_hex = Signature.from_values(EXAMPLE_R, EXAMPLE_S, 336).to_hex()
    with pytest.raises(NumericParseError):
        Signature.from_hex(sig_hex[:80] + "    ")
    with pytest.raises(NumericParseError):
        Signature.from_hex("0x" + sig_hex[:82])
