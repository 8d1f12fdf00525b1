"""
Unit tests for openapi_scoper.cli module.
"""

import io
import json
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr
from pathlib import Path
from openapi_scoper.cli import create_parser, main


SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'CLI API', 'version': '1.0.0'},
    'paths': {
        '/pets': {'get': {'tags': ['pets'], 'responses': {'200': {
            'description': 'ok',
            'content': {'application/json': {'schema': {'$ref': '#/components/schemas/Pet'}}}}}}},
        '/owners': {'get': {'tags': ['owners'], 'responses': {'200': {'description': 'ok'}}}},
    },
    'components': {'schemas': {'Pet': {'type': 'object'}, 'Owner': {'type': 'object'}}},
}


class TestCLI(unittest.TestCase):
    """Test cases for the command-line interface."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.input_file = Path(self.temp_dir) / 'openapi.json'
        with open(self.input_file, 'w') as f:
            json.dump(SPEC, f)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def run_cli(self, *argv):
        stdout = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(io.StringIO()):
            main(list(argv))
        return stdout.getvalue()

    def test_parser_defaults(self):
        """Test default values of the split command."""
        args = create_parser().parse_args(['split', 'openapi.yaml'])

        self.assertEqual(args.output, 'scoped_specs')
        self.assertEqual(args.format, 'json')
        self.assertIsNone(args.groups)

    def test_parser_requires_command(self):
        """Test a subcommand is mandatory."""
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            create_parser().parse_args([])

    def test_controllers(self):
        """Test listing controllers."""
        output = self.run_cli('controllers', str(self.input_file))

        self.assertEqual(json.loads(output), {'controllers': ['pets', 'owners']})

    def test_filter_to_stdout(self):
        """Test printing a scoped document."""
        output = self.run_cli('filter', str(self.input_file), 'pets')

        scoped = json.loads(output)
        self.assertEqual(list(scoped['paths']), ['/pets'])
        self.assertEqual(scoped['components']['schemas'], {'Pet': {'type': 'object'}})

    def test_filter_to_file(self):
        """Test writing a scoped document to a file."""
        output_file = Path(self.temp_dir) / 'out' / 'owners.json'

        self.run_cli('filter', str(self.input_file), 'owners', '-o', str(output_file))

        with open(output_file, 'r') as f:
            scoped = json.load(f)
        self.assertEqual(list(scoped['paths']), ['/owners'])
        self.assertEqual(scoped['components']['schemas'], {})

    def test_filter_to_file_keeps_given_name(self):
        """Test the output file is written exactly where requested."""
        for name in ('pets.yaml', 'pets.txt', 'pets'):
            output_file = Path(self.temp_dir) / 'named' / name

            self.run_cli('filter', str(self.input_file), 'pets', '-o', str(output_file))

            self.assertTrue(output_file.exists(), name)
            with open(output_file, 'r', encoding='utf-8') as f:
                scoped = json.load(f)
            self.assertEqual(list(scoped['paths']), ['/pets'])

        self.assertEqual(
            sorted(p.name for p in (Path(self.temp_dir) / 'named').iterdir()),
            ['pets', 'pets.txt', 'pets.yaml']
        )

    def test_filter_to_unwritable_file(self):
        """Test a failed write exits with an error."""
        blocker = Path(self.temp_dir) / 'blocker'
        blocker.write_text('not a directory')

        with self.assertRaises(SystemExit) as ctx:
            self.run_cli('filter', str(self.input_file), 'pets', '-o', str(blocker / 'out.json'))

        self.assertEqual(ctx.exception.code, 1)

    def test_split(self):
        """Test splitting into one file per controller."""
        output_dir = Path(self.temp_dir) / 'split'

        output = self.run_cli('split', str(self.input_file), '-o', str(output_dir), '-g', 'pets')

        self.assertTrue((output_dir / 'pets.json').exists())
        self.assertFalse((output_dir / 'owners.json').exists())
        self.assertIn('Created:', output)

    def test_missing_input_file(self):
        """Test a missing input file exits with an error."""
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli('controllers', str(Path(self.temp_dir) / 'missing.json'))

        self.assertEqual(ctx.exception.code, 1)

    def test_invalid_input_file(self):
        """Test an unparsable input file exits with an error."""
        bad_file = Path(self.temp_dir) / 'bad.json'
        bad_file.write_text('{not json')

        with self.assertRaises(SystemExit) as ctx:
            self.run_cli('controllers', str(bad_file))

        self.assertEqual(ctx.exception.code, 1)


if __name__ == '__main__':
    unittest.main()
