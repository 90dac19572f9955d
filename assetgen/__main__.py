from assetgen.pipeline import main

main()
