from dicomlocal.models import Blob, RouteDirective


def test_route_url_values_not_escaped():
    directive = RouteDirective(
        target_path="viewer",
        study_ids=("1.2.3",),
        data_source="dicomlocal",
        params=(("StudyInstanceUIDs", "1.2.3"), ("datasources", "dicomlocal")),
    )
    assert directive.query_string == "StudyInstanceUIDs=1.2.3&datasources=dicomlocal"
    assert directive.url == "/viewer?StudyInstanceUIDs=1.2.3&datasources=dicomlocal"


def test_blob_repr_hides_payload():
    blob = Blob(name="a.dcm", data=b"x" * 1024, content_type="application/dicom")
    assert repr(blob) == "Blob(name='a.dcm', size=1024, content_type='application/dicom')"
