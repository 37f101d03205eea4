import pytest

from tarsift.utils.archive import ContainerKind, classify, container_suffixes, is_container


@pytest.mark.parametrize(
    "name, kind",
    [
        ("a.tar", ContainerKind.TAR),
        ("a.tar.gz", ContainerKind.GZIP),
        ("a.tgz", ContainerKind.GZIP),
        ("a.taz", ContainerKind.GZIP),
        ("a.tar.bz2", ContainerKind.BZIP2),
        ("a.tar.bz", ContainerKind.BZIP2),
        ("a.tbz", ContainerKind.BZIP2),
        ("a.tbz2", ContainerKind.BZIP2),
        ("a.tz2", ContainerKind.BZIP2),
        ("a.tb2", ContainerKind.BZIP2),
        ("a.tar.xz", ContainerKind.XZ),
        ("a.txz", ContainerKind.XZ),
        ("a.tar.zst", ContainerKind.ZSTD),
        ("a.tzst", ContainerKind.ZSTD),
        ("a.tar.zstd", ContainerKind.ZSTD),
    ],
)
def test_known_suffixes(name, kind):
    """Every suffix in the table resolves to its decompression kind."""
    assert classify(name) is kind
    assert is_container(name)


def test_case_insensitive():
    """Upper-case and mixed-case suffixes classify the same way."""
    assert classify("BACKUP.TAR.GZ") is ContainerKind.GZIP
    assert classify("Data.TxZ") is ContainerKind.XZ


def test_entry_names_with_directories():
    """Directories inside an entry name do not disturb the suffix check."""
    assert classify("var/backups/etc.tar.bz2") is ContainerKind.BZIP2


@pytest.mark.parametrize("name", ["notes.txt", "a.gz", "a.zip", "tar", "a.tar.gz.sig", ""])
def test_non_containers(name):
    """Unknown suffixes, bare compression and other formats are leaves."""
    assert classify(name) is ContainerKind.NONE
    assert not is_container(name)
    assert not ContainerKind.NONE.is_container


def test_suffix_table_order():
    """The table lists every kind except NONE, plain tar first."""
    table = container_suffixes()
    assert list(table) == [
        ContainerKind.TAR,
        ContainerKind.GZIP,
        ContainerKind.BZIP2,
        ContainerKind.XZ,
        ContainerKind.ZSTD,
    ]
    assert ".tgz" in table[ContainerKind.GZIP]
