"""Helpers that build archives and index documents in memory for tests."""
import io
import tarfile
import zipfile

METADATA = """\
Metadata-Version: 2.1
Name: demo
Version: 1.2.0
Summary: A demo package
Home-page: https://example.com
Author: Jane Doe
Author-email: jane@example.com
License: MIT
Keywords: demo,sample
Classifier: Programming Language :: Python :: 3
Classifier: License :: OSI Approved :: MIT License
Project-URL: Documentation, https://docs.example.com
Requires-Python: >=3.8
Requires-Dist: idna (<4,>=2.5) ; extra == 'socks'
Provides-Extra: socks

Long description that is never shown.
"""

RECORD = """\
demo/__init__.py,sha256=abc,10
demo/core.py,sha256=def,20
demo_helper.py,sha256=ghi,5
demo-1.2.0.dist-info/METADATA,sha256=jkl,100
demo-1.2.0.dist-info/RECORD,,
demo-1.2.0.data/scripts/demo-tool,sha256=mno,30
"""

ENTRY_POINTS = """\
[console_scripts]
demo = demo.core:main

[demo.plugins]
extra = demo.core:plugin
"""


def make_zip(members):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, text in members.items():
            zf.writestr(name, text)
    return buffer.getvalue()


def make_wheel(metadata=METADATA, record=RECORD, entry_points=ENTRY_POINTS, dist_info="demo-1.2.0.dist-info"):
    members = {
        "demo/__init__.py": "",
        f"{dist_info}/METADATA": metadata,
    }
    if record is not None:
        members[f"{dist_info}/RECORD"] = record
    if entry_points is not None:
        members[f"{dist_info}/entry_points.txt"] = entry_points
    return make_zip(members)


def make_tar(members, mode="w:gz"):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as tf:
        for name, text in members.items():
            data = text.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def make_sdist(metadata=METADATA, top="demo-1.2.0"):
    return make_tar({
        f"{top}/PKG-INFO": metadata,
        f"{top}/demo.egg-info/PKG-INFO": metadata,
        f"{top}/setup.py": "",
    })


def file_entry(filename, packagetype=None, yanked=False, reason=None, requires_python=None,
               size=1234, upload_time="2024-01-02T03:04:05.000000Z"):
    if packagetype is None:
        packagetype = "bdist_wheel" if filename.endswith(".whl") else "sdist"
    return {
        "filename": filename,
        "url": f"https://files.example.org/{filename}",
        "packagetype": packagetype,
        "requires_python": requires_python,
        "size": size,
        "upload_time_iso_8601": upload_time,
        "digests": {"sha256": "0" * 64},
        "yanked": yanked,
        "yanked_reason": reason,
    }


def release_files(name, version, yanked=False, reason=None):
    return [
        file_entry(f"{name}-{version}.tar.gz", yanked=yanked, reason=reason),
        file_entry(f"{name}-{version}-py3-none-any.whl", yanked=yanked, reason=reason),
    ]


def index_document(versions, name="demo", info=None, yanked=()):
    """Index document for ``versions``; versions in ``yanked`` have all files yanked."""
    document_info = {
        "name": name,
        "version": versions[0] if versions else None,
        "summary": "Index summary",
        "license": "MIT",
        "author": "Jane Doe",
        "author_email": "jane@example.com",
        "home_page": "",
        "project_urls": {"Source": "https://git.example.com/demo"},
        "classifiers": ["Programming Language :: Python :: 3"],
        "keywords": "",
        "requires_dist": ["idna>=2.5"],
        "requires_python": ">=3.8",
        "project_url": f"https://pypi.org/project/{name}/",
        "yanked": False,
        "yanked_reason": None,
    }
    document_info.update(info or {})
    return {
        "info": document_info,
        "releases": {
            v: release_files(name, v, yanked=v in yanked, reason="broken" if v in yanked else None)
            for v in versions
        },
    }
