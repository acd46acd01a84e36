"""formfoundry test suite.

Test organization:
- test_field_store.py: FieldValue and FormState (the per-form store)
- test_visibility.py: conditional field activation
- test_rules.py, test_validation.py: rule chains and the validation engine
- test_controller.py: submit lifecycle and error policies
- test_schema_reader.py, test_schemas.py: schema files and fail-fast checks
- test_console.py, test_cli.py: terminal front-end and command line
- test_settings.py, test_logging_config.py, test_errors.py: ambient plumbing
"""
