from twig.cli import main

main()
