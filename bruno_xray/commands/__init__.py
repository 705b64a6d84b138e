"""
CLI Commands.

- upload-results: convert a Bruno report and import it into Xray.
- download-dataset: export a test's Xray dataset as CSV.
- run-suite: run a suite file with Bruno and upload every directory.
"""

from bruno_xray.commands.download_dataset import download_dataset
from bruno_xray.commands.run_suite import SuiteRunner
from bruno_xray.commands.upload_results import UploadOptions, upload_results

__all__ = ["download_dataset", "SuiteRunner", "UploadOptions", "upload_results"]
