from setuptools import find_packages, setup

setup(
  name = 'dump-dir',
  packages = find_packages('src'),
  package_dir = {'': 'src'},
  version = '0.1.0',
  description = 'Print the file contents of a directory tree, git-aware and filter-configurable',
  keywords = ['cli', 'gitignore', 'files', 'dump'],
  python_requires='>=3.11',
  install_requires=[
"typer>=0.9",
"rich>=13.0",
"pydantic>=2.0",
"pydantic-settings>=2.7",
"PyYAML>=6.0",
"pathspec>=0.12.1",
      ],
  extras_require={
    'test': [
"pytest>=7.0",
    ],
  },
  entry_points={
    'console_scripts': [
      'dump-dir=dumpdir.cli.main:run_cli',
    ],
  },
  classifiers=[
    'Development Status :: 4 - Beta',
    'Intended Audience :: Developers',
    'Topic :: Software Development :: Build Tools',
    'Programming Language :: Python :: 3',
    'Programming Language :: Python :: 3.11',
    'Programming Language :: Python :: 3.12',
  ],
)
