def pytest_addoption(parser):
    # read from sys.argv by the test modules, registered so that pytest accepts it
    parser.addoption('--fast', action='store_true', default=False, help='run fewer hypothesis examples')
