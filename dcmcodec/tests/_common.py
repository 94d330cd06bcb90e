# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Data shared by the tests."""

from dcmcodec.dataelem import DataElement
from dcmcodec.dataset import Dataset, DicomDocument, Item
from dcmcodec.sequence import Sequence
from dcmcodec.uid import ExplicitVRLittleEndian

# Undefined length SQ (0008,1140), explicit VR little endian
SQ_UNDEFINED = "08 00 40 11 53 51 00 00 ff ff ff ff"
ITEM_UNDEFINED = " fe ff 00 e0 ff ff ff ff"
ITEM_DELIMITER = " fe ff 0d e0 00 00 00 00"
SEQ_DELIMITER = " fe ff dd e0 00 00 00 00"


def nested_sequences(depth):
    """Return the hex for `depth` undefined length sequences nested one
    inside the other, each holding one undefined length item.
    """
    opening = (SQ_UNDEFINED + ITEM_UNDEFINED + " ") * depth
    closing = (ITEM_DELIMITER + SEQ_DELIMITER) * depth
    return opening + closing


def make_document(transfer_syntax=ExplicitVRLittleEndian, nested=True):
    """Return a small secondary capture style document."""
    file_meta = Dataset()
    file_meta.add(
        DataElement.from_value(
            0x00020002, 'UI', '1.2.840.10008.5.1.4.1.1.7'
        )
    )
    file_meta.add(DataElement.from_value(0x00020003, 'UI', '1.2.3.4'))
    file_meta.add(DataElement.from_value(0x00020010, 'UI', transfer_syntax))

    ds = Dataset()
    ds.add(
        DataElement.from_value(
            'SOPClassUID', 'UI', '1.2.840.10008.5.1.4.1.1.7'
        )
    )
    ds.add(DataElement.from_value('SOPInstanceUID', 'UI', '1.2.3.4'))
    ds.add(DataElement.from_value('StudyDate', 'DA', '20200101'))
    ds.add(DataElement.from_value('Modality', 'CS', 'OT'))
    ds.add(DataElement.from_value('PatientName', 'PN', 'CITIZEN^Joan'))
    ds.add(DataElement.from_value('PatientID', 'LO', '12345'))
    ds.add(DataElement.from_value('Rows', 'US', 2))
    ds.add(DataElement.from_value('Columns', 'US', 2))
    ds.add(DataElement.from_value('BitsStored', 'US', 8))
    if nested:
        item = Item()
        item.add(
            DataElement.from_value(
                'ReferencedSOPClassUID', 'UI', '1.2.840.10008.5.1.4.1.1.2'
            )
        )
        item.add(
            DataElement.from_value('ReferencedSOPInstanceUID', 'UI', '1.2.5')
        )
        ds.add(
            DataElement('ReferencedImageSequence', 'SQ', Sequence([item]))
        )

    ds.add(DataElement('PixelData', 'OB', b'\x00\x01\x02\x03'))

    return DicomDocument(file_meta, ds)
