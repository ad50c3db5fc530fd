from setuptools import setup, find_packages


def load_requirements(filename='requirements.txt'):
    with open(filename, 'r') as file:
        return [line.strip() for line in file.read().splitlines() if line.strip() and not line.startswith('#')]

setup(
    name='gm-ecc',
    version='0.1.0',
    author='Luke Li',
    description='SM2 / SM3 (GM/T 0003, GM/T 0004) elliptic curve cryptography in pure python.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[],
    extras_require={
        'test': load_requirements('requirements-test.txt'),
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Security :: Cryptography',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.7',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
    ],
    python_requires='>=3.7',
)
