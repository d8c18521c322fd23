from setuptools import setup, find_packages

setup(
    name='statlens',
    version='0.1',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'numpy >= 1.22.4',
    ],
    extras_require={
        'test': ['pytest'],
    },
    description='Descriptive statistics, outlier detection, pattern mining and trend decomposition for numeric data.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires=">=3.10",
)
