"""DICOM data dictionary subset used for implicit VR decoding.

Entries are ``{tag: (VR, VM, name, is_retired, keyword), ...}``. Only
commonly encountered attributes are listed; further entries can be added at
run time with :func:`dcmcodec.datadict.add_dict_entries` or by passing a
custom :class:`~dcmcodec.datadict.TagDictionary` in the decode settings.
"""

DicomDictionary = {
    # File Meta Information, Part 10 Table 7.1-1
    0x00020000: ('UL', '1', "File Meta Information Group Length", '', 'FileMetaInformationGroupLength'),  # noqa
    0x00020001: ('OB', '1', "File Meta Information Version", '', 'FileMetaInformationVersion'),  # noqa
    0x00020002: ('UI', '1', "Media Storage SOP Class UID", '', 'MediaStorageSOPClassUID'),  # noqa
    0x00020003: ('UI', '1', "Media Storage SOP Instance UID", '', 'MediaStorageSOPInstanceUID'),  # noqa
    0x00020010: ('UI', '1', "Transfer Syntax UID", '', 'TransferSyntaxUID'),  # noqa
    0x00020012: ('UI', '1', "Implementation Class UID", '', 'ImplementationClassUID'),  # noqa
    0x00020013: ('SH', '1', "Implementation Version Name", '', 'ImplementationVersionName'),  # noqa
    0x00020016: ('AE', '1', "Source Application Entity Title", '', 'SourceApplicationEntityTitle'),  # noqa
    0x00020017: ('AE', '1', "Sending Application Entity Title", '', 'SendingApplicationEntityTitle'),  # noqa
    0x00020018: ('AE', '1', "Receiving Application Entity Title", '', 'ReceivingApplicationEntityTitle'),  # noqa
    0x00020100: ('UI', '1', "Private Information Creator UID", '', 'PrivateInformationCreatorUID'),  # noqa
    0x00020102: ('OB', '1', "Private Information", '', 'PrivateInformation'),  # noqa
    # Identification
    0x00080005: ('CS', '1-n', "Specific Character Set", '', 'SpecificCharacterSet'),  # noqa
    0x00080008: ('CS', '2-n', "Image Type", '', 'ImageType'),
    0x00080012: ('DA', '1', "Instance Creation Date", '', 'InstanceCreationDate'),  # noqa
    0x00080013: ('TM', '1', "Instance Creation Time", '', 'InstanceCreationTime'),  # noqa
    0x00080016: ('UI', '1', "SOP Class UID", '', 'SOPClassUID'),
    0x00080018: ('UI', '1', "SOP Instance UID", '', 'SOPInstanceUID'),
    0x00080020: ('DA', '1', "Study Date", '', 'StudyDate'),
    0x00080021: ('DA', '1', "Series Date", '', 'SeriesDate'),
    0x00080022: ('DA', '1', "Acquisition Date", '', 'AcquisitionDate'),
    0x00080023: ('DA', '1', "Content Date", '', 'ContentDate'),
    0x00080030: ('TM', '1', "Study Time", '', 'StudyTime'),
    0x00080031: ('TM', '1', "Series Time", '', 'SeriesTime'),
    0x00080032: ('TM', '1', "Acquisition Time", '', 'AcquisitionTime'),
    0x00080033: ('TM', '1', "Content Time", '', 'ContentTime'),
    0x00080050: ('SH', '1', "Accession Number", '', 'AccessionNumber'),
    0x00080060: ('CS', '1', "Modality", '', 'Modality'),
    0x00080064: ('CS', '1', "Conversion Type", '', 'ConversionType'),
    0x00080070: ('LO', '1', "Manufacturer", '', 'Manufacturer'),
    0x00080080: ('LO', '1', "Institution Name", '', 'InstitutionName'),
    0x00080090: ('PN', '1', "Referring Physician's Name", '', 'ReferringPhysicianName'),  # noqa
    0x00080100: ('SH', '1', "Code Value", '', 'CodeValue'),
    0x00080102: ('SH', '1', "Coding Scheme Designator", '', 'CodingSchemeDesignator'),  # noqa
    0x00080104: ('LO', '1', "Code Meaning", '', 'CodeMeaning'),
    0x00081030: ('LO', '1', "Study Description", '', 'StudyDescription'),
    0x0008103E: ('LO', '1', "Series Description", '', 'SeriesDescription'),
    0x00081090: ('LO', '1', "Manufacturer's Model Name", '', 'ManufacturerModelName'),  # noqa
    0x00081110: ('SQ', '1', "Referenced Study Sequence", '', 'ReferencedStudySequence'),  # noqa
    0x00081115: ('SQ', '1', "Referenced Series Sequence", '', 'ReferencedSeriesSequence'),  # noqa
    0x00081140: ('SQ', '1', "Referenced Image Sequence", '', 'ReferencedImageSequence'),  # noqa
    0x00081150: ('UI', '1', "Referenced SOP Class UID", '', 'ReferencedSOPClassUID'),  # noqa
    0x00081155: ('UI', '1', "Referenced SOP Instance UID", '', 'ReferencedSOPInstanceUID'),  # noqa
    0x00082112: ('SQ', '1', "Source Image Sequence", '', 'SourceImageSequence'),  # noqa
    0x00089215: ('SQ', '1', "Derivation Code Sequence", '', 'DerivationCodeSequence'),  # noqa
    # Patient
    0x00100010: ('PN', '1', "Patient's Name", '', 'PatientName'),
    0x00100020: ('LO', '1', "Patient ID", '', 'PatientID'),
    0x00100030: ('DA', '1', "Patient's Birth Date", '', 'PatientBirthDate'),
    0x00100040: ('CS', '1', "Patient's Sex", '', 'PatientSex'),
    0x00101010: ('AS', '1', "Patient's Age", '', 'PatientAge'),
    0x00101020: ('DS', '1', "Patient's Size", '', 'PatientSize'),
    0x00101030: ('DS', '1', "Patient's Weight", '', 'PatientWeight'),
    0x00104000: ('LT', '1', "Patient Comments", '', 'PatientComments'),
    # Acquisition
    0x00180015: ('CS', '1', "Body Part Examined", '', 'BodyPartExamined'),
    0x00180050: ('DS', '1', "Slice Thickness", '', 'SliceThickness'),
    0x00180060: ('DS', '1', "KVP", '', 'KVP'),
    0x00180088: ('DS', '1', "Spacing Between Slices", '', 'SpacingBetweenSlices'),  # noqa
    0x00181020: ('LO', '1-n', "Software Versions", '', 'SoftwareVersions'),
    0x00185100: ('CS', '1', "Patient Position", '', 'PatientPosition'),
    # Relationship
    0x0020000D: ('UI', '1', "Study Instance UID", '', 'StudyInstanceUID'),
    0x0020000E: ('UI', '1', "Series Instance UID", '', 'SeriesInstanceUID'),
    0x00200010: ('SH', '1', "Study ID", '', 'StudyID'),
    0x00200011: ('IS', '1', "Series Number", '', 'SeriesNumber'),
    0x00200012: ('IS', '1', "Acquisition Number", '', 'AcquisitionNumber'),
    0x00200013: ('IS', '1', "Instance Number", '', 'InstanceNumber'),
    0x00200020: ('CS', '2', "Patient Orientation", '', 'PatientOrientation'),  # noqa
    0x00200032: ('DS', '3', "Image Position (Patient)", '', 'ImagePositionPatient'),  # noqa
    0x00200037: ('DS', '6', "Image Orientation (Patient)", '', 'ImageOrientationPatient'),  # noqa
    0x00200052: ('UI', '1', "Frame of Reference UID", '', 'FrameOfReferenceUID'),  # noqa
    0x00201041: ('DS', '1', "Slice Location", '', 'SliceLocation'),
    0x00204000: ('LT', '1', "Image Comments", '', 'ImageComments'),
    # Image Pixel
    0x00280002: ('US', '1', "Samples per Pixel", '', 'SamplesPerPixel'),
    0x00280004: ('CS', '1', "Photometric Interpretation", '', 'PhotometricInterpretation'),  # noqa
    0x00280006: ('US', '1', "Planar Configuration", '', 'PlanarConfiguration'),  # noqa
    0x00280008: ('IS', '1', "Number of Frames", '', 'NumberOfFrames'),
    0x00280009: ('AT', '1-n', "Frame Increment Pointer", '', 'FrameIncrementPointer'),  # noqa
    0x00280010: ('US', '1', "Rows", '', 'Rows'),
    0x00280011: ('US', '1', "Columns", '', 'Columns'),
    0x00280030: ('DS', '2', "Pixel Spacing", '', 'PixelSpacing'),
    0x00280100: ('US', '1', "Bits Allocated", '', 'BitsAllocated'),
    0x00280101: ('US', '1', "Bits Stored", '', 'BitsStored'),
    0x00280102: ('US', '1', "High Bit", '', 'HighBit'),
    0x00280103: ('US', '1', "Pixel Representation", '', 'PixelRepresentation'),  # noqa
    0x00281050: ('DS', '1-n', "Window Center", '', 'WindowCenter'),
    0x00281051: ('DS', '1-n', "Window Width", '', 'WindowWidth'),
    0x00281052: ('DS', '1', "Rescale Intercept", '', 'RescaleIntercept'),
    0x00281053: ('DS', '1', "Rescale Slope", '', 'RescaleSlope'),
    0x00283010: ('SQ', '1', "VOI LUT Sequence", '', 'VOILUTSequence'),
    # Study and procedure
    0x00321060: ('LO', '1', "Requested Procedure Description", '', 'RequestedProcedureDescription'),  # noqa
    0x00400254: ('LO', '1', "Performed Procedure Step Description", '', 'PerformedProcedureStepDescription'),  # noqa
    0x00400275: ('SQ', '1', "Request Attributes Sequence", '', 'RequestAttributesSequence'),  # noqa
    0x0040A730: ('SQ', '1', "Content Sequence", '', 'ContentSequence'),
    # Hanging protocols
    0x0072005E: ('AE', '1-n', "Selector AE Value", '', 'SelectorAEValue'),  # noqa
    0x0072005F: ('AS', '1-n', "Selector AS Value", '', 'SelectorASValue'),  # noqa
    0x00720060: ('AT', '1-n', "Selector AT Value", '', 'SelectorATValue'),  # noqa
    0x00720061: ('DA', '1-n', "Selector DA Value", '', 'SelectorDAValue'),  # noqa
    0x00720062: ('CS', '1-n', "Selector CS Value", '', 'SelectorCSValue'),  # noqa
    0x00720064: ('IS', '1-n', "Selector IS Value", '', 'SelectorISValue'),  # noqa
    0x00720066: ('LO', '1-n', "Selector LO Value", '', 'SelectorLOValue'),  # noqa
    0x00720068: ('LT', '1', "Selector LT Value", '', 'SelectorLTValue'),  # noqa
    0x0072006A: ('PN', '1-n', "Selector PN Value", '', 'SelectorPNValue'),  # noqa
    0x0072006C: ('SH', '1-n', "Selector SH Value", '', 'SelectorSHValue'),  # noqa
    0x0072006E: ('ST', '1', "Selector ST Value", '', 'SelectorSTValue'),  # noqa
    0x00720070: ('UT', '1', "Selector UT Value", '', 'SelectorUTValue'),  # noqa
    0x00720072: ('DS', '1-n', "Selector DS Value", '', 'SelectorDSValue'),  # noqa
    0x00720073: ('FD', '1-n', "Selector FD Value", '', 'SelectorFDValue'),  # noqa
    0x00720074: ('FL', '1-n', "Selector FL Value", '', 'SelectorFLValue'),  # noqa
    0x00720076: ('UL', '1-n', "Selector UL Value", '', 'SelectorULValue'),  # noqa
    0x00720078: ('US', '1-n', "Selector US Value", '', 'SelectorUSValue'),  # noqa
    0x0072007A: ('SL', '1-n', "Selector SL Value", '', 'SelectorSLValue'),  # noqa
    0x0072007C: ('SS', '1-n', "Selector SS Value", '', 'SelectorSSValue'),  # noqa
    0x0072007E: ('UI', '1-n', "Selector UI Value", '', 'SelectorUIValue'),  # noqa
    0x00720080: ('SQ', '1', "Selector Code Sequence Value", '', 'SelectorCodeSequenceValue'),  # noqa
    0x00720081: ('OV', '1', "Selector OV Value", '', 'SelectorOVValue'),  # noqa
    0x00720082: ('SV', '1-n', "Selector SV Value", '', 'SelectorSVValue'),  # noqa
    0x00720083: ('UV', '1-n', "Selector UV Value", '', 'SelectorUVValue'),  # noqa
    # Pixel data
    0x7FE00008: ('OF', '1', "Float Pixel Data", '', 'FloatPixelData'),
    0x7FE00009: ('OD', '1', "Double Float Pixel Data", '', 'DoubleFloatPixelData'),  # noqa
    0x7FE00010: ('OW', '1', "Pixel Data", '', 'PixelData'),
    0xFFFAFFFA: ('SQ', '1', "Digital Signatures Sequence", '', 'DigitalSignaturesSequence'),  # noqa
    0xFFFCFFFC: ('OB', '1', "Data Set Trailing Padding", '', 'DataSetTrailingPadding'),  # noqa
    # Item framing, Part 5 Section 7.5
    0xFFFEE000: ('NONE', '1', "Item", '', 'Item'),
    0xFFFEE00D: ('NONE', '1', "Item Delimitation Item", '', 'ItemDelimitationItem'),  # noqa
    0xFFFEE0DD: ('NONE', '1', "Sequence Delimitation Item", '', 'SequenceDelimitationItem'),  # noqa
}
