from csvcalc.cli import main

main()
