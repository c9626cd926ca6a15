import pytest

from esnode.merkle import (
    ZERO_HASH,
    MerkleProver,
    MinMerkleTreeProver,
    find_n_chunk,
    keccak256,
)

CHUNK = 4096
BITS = 5


def h(hex_str):
    return bytes.fromhex(hex_str.removeprefix("0x"))


Z = h("0x0000000000000000000000000000000000000000000000000000000000000000")
H1 = h("0x9edfefee6a285de13826a2f33d0056539b801642d4955a202c46835bfcad0c02")
HZ = h("0xa8bae11751799de4dbe638406c5c9642c0e791f2a65e852a05ba4fdf0d88e3e6")
E1 = h("0xad3228b676f7d3cd4284a5443f17f1962b36e491b30a40b2405849e597ba5fb5")
E2 = h("0xb4c11951957c6f8f642c4af61cd6b24640fec6dc7fc607ee8206a99e92410d30")
E3 = h("0x21ddb9a356815c3fac1026b6dec5df3124afbadb485c9ba5a3e3398a04b7ba85")
E4 = h("0xe58769b32a1beaf1ea27375a44095a0d1fb664ce2dd358e7fcbfb78c26a19344")
P1318 = h("0x1318c29a10619d9f0fb25d52cff12a9daef407ec925c73f272e54c668ace058a")
P3F6B = h("0x3f6b60a21968bb0bffe0588efabc9e728eda5e90afeba45d56492f9d4dd90ba5")
P25CD = h("0x25cda0619b5fab4aa01fc080d4ea4cd4bbc2009bccf50c81a5daacb15ce78c62")
P1521 = h("0x15216cfd3591a782767836737dbd61cc8e4011971abe750bb8569b11f0651ec1")
P94BD = h("0x94bd48c9ae8d3859dd4fa2650dd966ba29cb89eb952958ea1ec0f516defeb7c7")
PC39E = h("0xc39e39502196b06ae000fb1d95851ab467f4a69727e497d24487bb8322ba84f2")
PF527 = h("0xf52716afaf825c4ab08b3edf97e783ec898efda7a1d0d175f989a3ba7ba11c0c")
P8CE1 = h("0x8ce139afc995bc9df8a240625aa2d95aacb82015307ac611b920a97b007caa63")
PBF76 = h("0xbf76e6bed66c470fb221dad020fc920c47abe5c3a9b6e8bc28865229f3a47e10")
P9EA6 = h("0x9ea6831d655dcc710a768112da04b15a00d794c581193632eb5b48c945741f08")


def blob(zero_chunks):
    return bytes(CHUNK * zero_chunks) + b"\x01\x01\x01\x01"


MERKLE_CASES = [
    (b"", Z, {0: [], 1: [], 31: []}),
    (
        b"\x01\x01\x01\x01",
        h("0x5b1ece23efcb64436060f1196af7f4e563f88580317a80219f059be0143c77f7"),
        {
            0: [Z, E1, E2, E3, E4],
            1: [H1, E1, E2, E3, E4],
            31: [Z, E1, E2, E3, h("0x310954b48993f8691a5c56b2ccd12b3b961034c242fee15fd214010292a0a0e9")],
        },
    ),
    (
        blob(1),
        h("0x2fb98e5ba32e13328ffe482f6941e50916b15a98bbef192fec7914ba9a6679cb"),
        {
            0: [H1, E1, E2, E3, E4],
            1: [HZ, E1, E2, E3, E4],
            2: [Z, P1318, E2, E3, E4],
            31: [Z, E1, E2, E3, h("0xdc93eb972e7d0c74ad1e0f2b7ca67047dcf7af893f279a842d19ff0bc6529ea7")],
        },
    ),
    (
        blob(2),
        h("0x97127aaf96faa87f2fea4a7b8e23775a7975e009650f1647d549240c359db7b3"),
        {
            0: [HZ, P3F6B, E2, E3, E4],
            1: [HZ, P3F6B, E2, E3, E4],
            2: [Z, P25CD, E2, E3, E4],
            3: [H1, P25CD, E2, E3, E4],
            31: [Z, E1, E2, E3, h("0x7d8be77dfe322d6a8bbe19049367f03dd99687bcd59f3429df29e76dabcf8c69")],
        },
    ),
    (
        blob(10),
        h("0x43dd8637b351884c4b69aaabaa2de07cb514c5f5043d7ac5afd1e8ffaa937f2d"),
        {
            0: [HZ, P25CD, P1521, P94BD, E4],
            1: [HZ, P25CD, P1521, P94BD, E4],
            10: [Z, P25CD, E2, PC39E, E4],
            15: [Z, E1, PF527, PC39E, E4],
            31: [Z, E1, E2, E3, P9EA6],
        },
    ),
    (
        blob(31),
        h("0xf6692599b6a2fef3dd4e59d9d3cf71967051eaee9d52951a9ddf29b09aedf8c0"),
        {
            0: [HZ, P25CD, P1521, PC39E, P8CE1],
            1: [HZ, P25CD, P1521, PC39E, P8CE1],
            2: [HZ, P25CD, P1521, PC39E, P8CE1],
            30: [H1, P25CD, P1521, PC39E, PBF76],
            31: [HZ, P25CD, P1521, PC39E, PBF76],
        },
    ),
]

MIN_CASES = [
    (b"", Z, {0: [], 1: [], 31: []}),
    (b"\x01\x01\x01\x01", H1, {0: [], 1: [], 31: []}),
    (blob(1), P1318, {0: [H1], 1: [HZ], 2: [], 31: []}),
    (
        blob(2),
        PF527,
        {
            0: [HZ, P3F6B],
            1: [HZ, P3F6B],
            2: [Z, P25CD],
            3: [H1, P25CD],
            31: [],
        },
    ),
    (
        blob(10),
        P9EA6,
        {
            0: [HZ, P25CD, P1521, P94BD],
            1: [HZ, P25CD, P1521, P94BD],
            10: [Z, P25CD, E2, PC39E],
            15: [Z, E1, PF527, PC39E],
            31: [],
        },
    ),
    (
        blob(31),
        h("0xf6692599b6a2fef3dd4e59d9d3cf71967051eaee9d52951a9ddf29b09aedf8c0"),
        {
            0: [HZ, P25CD, P1521, PC39E, P8CE1],
            1: [HZ, P25CD, P1521, PC39E, P8CE1],
            2: [HZ, P25CD, P1521, PC39E, P8CE1],
            30: [H1, P25CD, P1521, PC39E, PBF76],
            31: [HZ, P25CD, P1521, PC39E, PBF76],
        },
    ),
]


def flatten(cases):
    return [
        (data, root, idx, proofs)
        for data, root, chunk_proofs in cases
        for idx, proofs in chunk_proofs.items()
    ]


def leaf_hash(data, idx):
    if len(data) > idx * CHUNK:
        return keccak256(data[idx * CHUNK:(idx + 1) * CHUNK])
    return ZERO_HASH


@pytest.mark.parametrize("data,root,_proofs", MERKLE_CASES)
def test_merkle_root(data, root, _proofs):
    assert MerkleProver().get_root(data, 1 << BITS, CHUNK) == root


@pytest.mark.parametrize("data,root,idx,proofs", flatten(MERKLE_CASES))
def test_merkle_proofs(data, root, idx, proofs):
    prover = MerkleProver()
    assert prover.get_proof(data, BITS, idx, CHUNK) == proofs
    assert prover.get_root_with_proof(leaf_hash(data, idx), idx, proofs) == root


@pytest.mark.parametrize("data,root,_proofs", MIN_CASES)
def test_min_merkle_root(data, root, _proofs):
    assert MinMerkleTreeProver().get_root(data, 1 << BITS, CHUNK) == root


@pytest.mark.parametrize("data,root,idx,proofs", flatten(MIN_CASES))
def test_min_merkle_proofs(data, root, idx, proofs):
    prover = MinMerkleTreeProver()
    assert prover.get_proof(data, BITS, idx, CHUNK) == proofs
    n_min, _ = find_n_chunk(len(data), CHUNK)
    if n_min > idx:
        assert prover.get_root_with_proof(leaf_hash(data, idx), idx, proofs) == root
    else:
        assert leaf_hash(data, idx) == ZERO_HASH
        assert proofs == []


def test_keccak256_leaf_values():
    assert keccak256(b"\x01\x01\x01\x01") == H1
    assert keccak256(bytes(CHUNK)) == HZ
    assert keccak256(Z, Z) == E1
    assert keccak256(b"\x01\x01", b"\x01\x01") == H1


def test_keccak256_empty():
    assert keccak256() == h("c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470")


@pytest.mark.parametrize(
    "data_len,expected",
    [(0, (0, 0)), (4, (1, 0)), (CHUNK + 4, (2, 1)), (2 * CHUNK + 4, (4, 2)), (10 * CHUNK + 4, (16, 4)), (31 * CHUNK + 4, (32, 5))],
)
def test_find_n_chunk(data_len, expected):
    assert find_n_chunk(data_len, CHUNK) == expected


def test_get_proof_index_out_of_scope():
    with pytest.raises(ValueError):
        MerkleProver().get_proof(b"\x01", BITS, 32, CHUNK)
    with pytest.raises(ValueError):
        MinMerkleTreeProver().get_proof(b"\x01", BITS, 32, CHUNK)


def test_get_root_with_proof_overflow():
    with pytest.raises(ValueError):
        MerkleProver().get_root_with_proof(H1, 4, [Z, Z])


def test_get_root_with_empty_proof_returns_hash():
    assert MerkleProver().get_root_with_proof(H1, 7, []) == H1