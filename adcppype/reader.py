"""
This module splits a raw Nortek Paradopp binary file into framed records.

Every record starts with the sync byte (0xA5), a record id and the record size in 16-bit words, and ends with a
checksum. The reader only checks the framing and the order of record types. Decoding field layouts is left to the
packet module.
"""

import logging
import os
from struct import unpack_from

from adcppype.core import (SYNC_BYTE, CHECKSUM_SEED, RECORD_PREFIX, RECORD_PREFIX_SIZE, NUM_CHECKSUM_BYTES,
                           HEADER_RECORD_IDS, PROFILE_RECORD_IDS)
from adcppype.errors import FormatError
from adcppype.structures import RawRecord

logger = logging.getLogger(__name__)


def compute_checksum(data: bytes | bytearray) -> int:
    """
    Compute the Paradopp checksum of a record. The checksum is the seed 0xB58C plus the sum of every little-endian
    16-bit word, modulo 2**16. A trailing odd byte is added as the high byte of a word.

    :param data: The record bytes, excluding the two checksum bytes.
    :return: The checksum as an unsigned 16-bit integer.
    """

    checksum = CHECKSUM_SEED
    n_words = len(data) // 2
    if n_words:
        checksum += sum(unpack_from(f'<{n_words}H', data))
    if len(data) % 2:
        checksum += data[-1] << 8
    return checksum % 65536


def split_records(buffer: bytes | bytearray) -> list[RawRecord]:
    """
    Split a buffer of Paradopp records into a list of RawRecords, preserving their order.

    :param buffer: The complete contents of a binary file.
    :return: A list of RawRecords.
    """

    records = []
    offset = 0
    while offset < len(buffer):
        if len(buffer) - offset < RECORD_PREFIX_SIZE:
            raise FormatError(f"Truncated record prefix, {len(buffer) - offset} trailing bytes", offset)
        sync, record_id, n_words = unpack_from(RECORD_PREFIX, buffer, offset)
        if sync != SYNC_BYTE:
            raise FormatError(f"Expected sync byte {SYNC_BYTE:#04x}, found {sync:#04x}", offset)
        record_size = n_words * 2
        if record_size < RECORD_PREFIX_SIZE + NUM_CHECKSUM_BYTES:
            raise FormatError(f"Record {record_id:#04x} declares an invalid size of {n_words} words", offset)
        end = offset + record_size
        if end > len(buffer):
            raise FormatError(f"Record {record_id:#04x} is truncated: expected {record_size} bytes, "
                              f"found {len(buffer) - offset}", offset)
        record = bytes(buffer[offset:end])
        [checksum] = unpack_from('<H', record, record_size - NUM_CHECKSUM_BYTES)
        expected = compute_checksum(record[:-NUM_CHECKSUM_BYTES])
        if checksum != expected:
            raise FormatError(f"Checksum mismatch in record {record_id:#04x}: "
                              f"found {checksum:#06x}, expected {expected:#06x}", offset)
        records.append(RawRecord(record_id=record_id, offset=offset, payload=record))
        offset = end
    _check_record_order(records)
    logger.debug("Split %d bytes into %d records.", len(buffer), len(records))
    return records


def _check_record_order(records: list[RawRecord]) -> None:
    """
    Check that a file starts with the hardware, head and user configuration, in that order,
    and that every following record is a profile record of one type.

    :param records: The records of a file, in file order.
    :return: None, raises a FormatError if the order is wrong.
    """

    n_headers = len(HEADER_RECORD_IDS)
    if len(records) < n_headers:
        raise FormatError(f"Expected at least {n_headers} configuration records, found {len(records)}")
    for record, expected_id in zip(records[:n_headers], HEADER_RECORD_IDS):
        if record.record_id != expected_id:
            raise FormatError(f"Expected configuration record {expected_id:#04x}, found {record.record_id:#04x}",
                              record.offset)
    data_records = records[n_headers:]
    if not data_records:
        return None
    data_id = data_records[0].record_id
    if data_id not in PROFILE_RECORD_IDS:
        raise FormatError(f"Unsupported data record {data_id:#04x}", data_records[0].offset)
    for record in data_records:
        if record.record_id != data_id:
            raise FormatError(f"Mixed data records: expected {data_id:#04x}, found {record.record_id:#04x}",
                              record.offset)


def read_records(filepath: str | os.PathLike) -> list[RawRecord]:
    """
    Read a Paradopp binary file into a list of RawRecords.
    The first three records are the hardware, head and user configuration, the rest are profile records.

    :param filepath: The filepath of the binary file.
    :return: A list of RawRecords, in file order.
    """

    filepath = os.path.normpath(filepath)
    with open(filepath, 'rb') as _file:
        buffer = _file.read()
    logger.debug("Read %d bytes from %s.", len(buffer), filepath)
    return split_records(buffer)
