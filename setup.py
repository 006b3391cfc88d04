from setuptools import setup, find_packages

setup(
    name='sdfmodeler',
    version='0.1.0',
    description='Live SDF modeling: Python scene scripts compiled to GLSL and raymarched in a native viewport.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    package_data={'sdfmodeler': ['glsl/*.glsl']},
    install_requires=[
        'numpy',
        'watchdog',
        'moderngl',
        'glfw',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Graphics :: 3D Modeling',
    ],
    python_requires='>=3.8',
)
