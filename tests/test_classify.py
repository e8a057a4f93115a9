import pytest

from dicomlocal.classify import classify_microscopy, is_microscopy_study
from dicomlocal.errors import ClassificationError
from dicomlocal.models import Instance, Series, Study
from dicomlocal.store import DicomMetadataStore, InstanceRecord


def _series(uid, modality, *instance_modalities):
    return Series(
        series_instance_uid=uid,
        modality=modality,
        instances=tuple(
            Instance(sop_instance_uid=f"{uid}.{i}", modality=m)
            for i, m in enumerate(instance_modalities, start=1)
        ),
    )


def test_series_level_match():
    study = Study(study_instance_uid="1", series=(_series("1.1", "CT", "CT"), _series("1.2", "SM")))
    assert is_microscopy_study(study)


def test_first_instance_match():
    study = Study(study_instance_uid="1", series=(_series("1.1", None, "SM", "CT"),))
    assert is_microscopy_study(study)


def test_only_first_instance_is_inspected():
    study = Study(study_instance_uid="1", series=(_series("1.1", "CT", "CT", "SM"),))
    assert not is_microscopy_study(study)


def test_series_without_instances_raises():
    study = Study(study_instance_uid="1", series=(_series("1.1", "CT"),))
    with pytest.raises(ClassificationError):
        is_microscopy_study(study)


def test_match_before_malformed_series_short_circuits():
    study = Study(study_instance_uid="1", series=(_series("1.1", "SM"), _series("1.2", "CT")))
    assert is_microscopy_study(study)


def test_classify_keeps_input_order():
    store = DicomMetadataStore()
    store.add_instances(
        [
            InstanceRecord("a", "a.1", "a.1.1", "SM"),
            InstanceRecord("b", "b.1", "b.1.1", "CT"),
            InstanceRecord("c", "c.1", "c.1.1", "SM"),
        ]
    )
    assert classify_microscopy(["c", "b", "a"], store) == ["c", "a"]


def test_unresolvable_study_is_not_microscopy(caplog):
    store = DicomMetadataStore()
    store.add_instances([InstanceRecord("a", "a.1", "a.1.1", "SM")])
    assert classify_microscopy(["missing", "a"], store) == ["a"]
    assert "missing" in caplog.text
