from userassist.cli import main

main()
