from prco.cli.app import main

main()
