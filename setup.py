from setuptools import setup


def read_file(file):
    with open(file, 'rb') as fh:
        data = fh.read()
    return data.decode('utf-8')


def read_version():
    about = {}
    exec(read_file('src/shapereader/__version__.py'), about)
    return about['__version__']


setup(name='shapereader',
      version=read_version(),
      description='Pure Python decoder for the geometry records of ESRI Shapefiles (.shp)',
      long_description=read_file('README.md'),
      long_description_content_type='text/markdown',
      packages=['shapereader'],
      package_dir={'': 'src'},
      license='MIT',
      zip_safe=False,
      keywords='gis geospatial geographic shapefile shapefiles shp',
      python_requires='>= 3.9',
      extras_require={'test': ['pytest']},
      entry_points={'console_scripts': ['shapereader=shapereader.__main__:main']},
      classifiers=['Programming Language :: Python',
                   'Programming Language :: Python :: 3',
                   'Topic :: Scientific/Engineering :: GIS',
                   'Topic :: Software Development :: Libraries',
                   'Topic :: Software Development :: Libraries :: Python Modules'])
