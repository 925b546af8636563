import pytest

from termqr.ecc import (
    Ecc,
    add_ecc_and_interleave,
    get_num_data_codewords,
    get_num_raw_data_modules,
    reed_solomon_compute_divisor,
    reed_solomon_compute_remainder,
    reed_solomon_multiply,
)

ALL_VERSIONS = range(1, 41)


def test_raw_data_modules_bounds_from_source():
    assert get_num_raw_data_modules(1) == 208
    assert get_num_raw_data_modules(40) == 29648


def test_raw_data_modules_increase_with_version():
    values = [get_num_raw_data_modules(v) for v in ALL_VERSIONS]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


@pytest.mark.parametrize("version", [0, 41, -3])
def test_raw_data_modules_rejects_bad_version(version):
    with pytest.raises(ValueError):
        get_num_raw_data_modules(version)


def test_data_codewords_range_from_source():
    assert get_num_data_codewords(1, Ecc.HIGH) == 9
    assert get_num_data_codewords(40, Ecc.LOW) == 2956


@pytest.mark.parametrize("version", ALL_VERSIONS)
def test_data_codewords_decrease_with_level(version):
    counts = [get_num_data_codewords(version, ecl) for ecl in Ecc]
    assert counts == sorted(counts, reverse=True)
    assert all(9 <= c <= 2956 for c in counts)


def test_version1_data_codewords_per_level():
    assert [get_num_data_codewords(1, ecl) for ecl in Ecc] == [19, 16, 13, 9]


def test_multiply_identity_and_zero():
    for x in range(256):
        assert reed_solomon_multiply(x, 1) == x
        assert reed_solomon_multiply(1, x) == x
        assert reed_solomon_multiply(x, 0) == 0


def test_multiply_reduces_by_field_polynomial():
    assert reed_solomon_multiply(0x80, 0x02) == 0x11D ^ 0x100


@pytest.mark.parametrize("x,y,z", [(3, 7, 200), (255, 128, 19), (91, 17, 230)])
def test_multiply_commutative_and_distributive(x, y, z):
    assert reed_solomon_multiply(x, y) == reed_solomon_multiply(y, x)
    assert reed_solomon_multiply(x, y ^ z) == (
        reed_solomon_multiply(x, y) ^ reed_solomon_multiply(x, z)
    )


def test_multiply_rejects_out_of_range():
    with pytest.raises(ValueError):
        reed_solomon_multiply(256, 1)


@pytest.mark.parametrize("degree", [1, 7, 10, 30])
def test_divisor_length(degree):
    assert len(reed_solomon_compute_divisor(degree)) == degree


def test_divisor_degree_one_is_x_plus_one():
    assert reed_solomon_compute_divisor(1) == bytes([1])


@pytest.mark.parametrize("degree", [0, 31])
def test_divisor_rejects_bad_degree(degree):
    with pytest.raises(ValueError):
        reed_solomon_compute_divisor(degree)


def test_remainder_of_zeros_is_zero():
    divisor = reed_solomon_compute_divisor(10)
    assert reed_solomon_compute_remainder(bytes(16), divisor) == bytes(10)


@pytest.mark.parametrize("degree", [7, 13, 22, 30])
def test_codeword_is_divisible_by_generator(degree):
    divisor = reed_solomon_compute_divisor(degree)
    data = bytes((i * 37 + 11) % 256 for i in range(40))
    ecc = reed_solomon_compute_remainder(data, divisor)
    assert reed_solomon_compute_remainder(data + ecc, divisor) == bytes(degree)


def test_hello_world_version1_medium_ecc():
    data = bytes([32, 91, 11, 120, 209, 114, 220, 77, 67, 64, 236, 17, 236, 17, 236, 17])
    ecc = reed_solomon_compute_remainder(data, reed_solomon_compute_divisor(10))
    assert list(ecc) == [196, 35, 39, 119, 235, 215, 231, 226, 93, 23]


def test_interleave_single_block_is_data_then_ecc():
    n = get_num_data_codewords(1, Ecc.MEDIUM)
    data = bytes(range(n))
    result = add_ecc_and_interleave(data, 1, Ecc.MEDIUM)
    raw = get_num_raw_data_modules(1) // 8
    ecc = reed_solomon_compute_remainder(data, reed_solomon_compute_divisor(raw - n))
    assert result == data + ecc


@pytest.mark.parametrize("version,ecl", [(5, Ecc.QUARTILE), (10, Ecc.HIGH), (6, Ecc.LOW)])
def test_interleave_keeps_every_data_byte(version, ecl):
    n = get_num_data_codewords(version, ecl)
    data = bytes(i % 256 for i in range(n))
    result = add_ecc_and_interleave(data, version, ecl)
    assert len(result) == get_num_raw_data_modules(version) // 8
    assert sorted(result[:n]) == sorted(data)
    assert result[0] == data[0]


def test_interleave_rejects_wrong_length():
    n = get_num_data_codewords(2, Ecc.LOW)
    with pytest.raises(ValueError):
        add_ecc_and_interleave(bytes(n + 1), 2, Ecc.LOW)